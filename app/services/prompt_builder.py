INVENTORY_FRAMING = """
Inventory data must be formatted cleanly like:

Limited shelf life: [I-003] chicken (open), [I-014] salad bag

Fridge: ...

Freezer: ...

Pantry: ...

Here is my inventory now:

"""


def build_prompt(template: str, inventory_text: str) -> str:
    return f"{template}\n{INVENTORY_FRAMING}{inventory_text}\n"


def build_messages(prompt: str) -> list:
    return [{"role": "user", "content": prompt}]
