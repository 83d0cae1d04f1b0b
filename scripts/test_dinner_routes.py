import unittest
from datetime import date, datetime, timezone

from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app
from app.models.meal_plan import Run
from app.services import document_store as ds
from app.services.completion_client import CompletionClient
from app.services.memory_store import MemoryStore

NOW = datetime(2025, 3, 3, 18, 0, tzinfo=timezone.utc)
TODAY = date(2025, 3, 3)

MEAL_JSON = '{"meals":[{"id":"M1","title":"Chicken stir fry","items":["I-1"]}]}'
REPLY = (
    "Monday Dinner Plan\n"
    "You're doing great!\n"
    "• Chicken stir fry\n"
    "• Pasta\n"
    "• Soup\n"
    f"{MEAL_JSON}\n"
)


class ScriptedCompletion(CompletionClient):
    def __init__(self, text):
        self.text = text
        self.calls = []

    def complete(self, model, messages, temperature, max_tokens):
        self.calls.append({"model": model, "messages": messages, "temperature": temperature, "max_tokens": max_tokens})
        if isinstance(self.text, Exception):
            raise self.text
        return {"choices": [{"message": {"content": self.text}}]}


def make_settings(**overrides):
    values = dict(
        STORE_BACKEND="memory",
        NOTION_DATABASE_INVENTORY_ID="inv",
        NOTION_DATABASE_AIDATA_ID="runs",
        OPENAI_API_KEY="sk-test",
        MODEL="gpt-test",
        PROMPT_TEMPLATE="Suggest three dinners.",
    )
    values.update(overrides)
    return Settings(**values)


class DinnerRoutesTestCase(unittest.TestCase):
    def setUp(self):
        self.store = MemoryStore()
        self.completion = ScriptedCompletion(REPLY)
        self.client = self._client(make_settings())

    def _client(self, settings):
        app = create_app(
            settings=settings,
            store=self.store,
            completion=self.completion,
            clock=lambda: NOW,
            today=lambda: TODAY,
        )
        return TestClient(app)

    def add_chicken(self):
        return self.store.create_record("inv", {
            "Item": ds.title("chicken"),
            "Category": ds.select("Fridge"),
            "Note": ds.rich_text("open"),
            "ID": ds.unique_id("I-", 1),
            "In stock": ds.checkbox(True),
        })

    def runs(self):
        return [Run.from_record(r) for r in self.store.records("runs")]


class TestGenerateDinner(DinnerRoutesTestCase):
    def test_success_writes_ok_run(self):
        self.add_chicken()
        r = self.client.post("/generate-dinner")

        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["dateLine"], "Monday Dinner Plan")
        self.assertEqual(body["meals"], ["Chicken stir fry", "Pasta", "Soup"])
        self.assertEqual(body["encouragement"], "You're doing great!")

        [run] = self.runs()
        self.assertEqual(run.status, "OK")
        self.assertEqual(run.date_line, "Monday Dinner Plan")
        self.assertEqual(run.meal1, "Chicken stir fry")
        self.assertEqual(run.encouragement, "You're doing great!")
        self.assertEqual(run.raw_json, MEAL_JSON)
        self.assertEqual(run.title, "Run – 2025-03-03 18:00")

    def test_prompt_and_completion_parameters(self):
        self.add_chicken()
        self.client.post("/generate-dinner")

        [call] = self.completion.calls
        self.assertEqual(call["model"], "gpt-test")
        self.assertEqual(call["temperature"], 0.4)
        self.assertEqual(call["max_tokens"], 900)
        prompt = call["messages"][0]["content"]
        self.assertTrue(prompt.startswith("Suggest three dinners."))
        self.assertIn("Fridge: [I-1] chicken (open)", prompt)

    def test_invalid_json_writes_error_run(self):
        self.add_chicken()
        self.completion.text = REPLY.replace(MEAL_JSON, '{"meals":[}')
        r = self.client.post("/generate-dinner")

        self.assertEqual(r.status_code, 500)
        self.assertFalse(r.json()["success"])
        self.assertIn("Invalid JSON", r.json()["error"])

        [run] = self.runs()
        self.assertEqual(run.status, "ERROR")
        self.assertTrue(run.title.endswith("[ERROR]"))
        self.assertTrue(run.encouragement.startswith("Oops — Invalid JSON"))

    def test_each_call_appends_one_run(self):
        self.add_chicken()
        self.client.post("/generate-dinner")
        self.completion.text = "no json here"
        self.client.post("/generate-dinner")
        self.completion.text = REPLY
        self.client.post("/generate-dinner")

        self.assertEqual([r.status for r in self.runs()], ["OK", "ERROR", "OK"])

    def test_backend_fault_is_500_with_error_run(self):
        self.add_chicken()
        self.completion.text = ConnectionError("LLM unreachable")
        r = self.client.post("/generate-dinner")

        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json()["error"], "LLM unreachable")
        self.assertEqual(self.runs()[0].status, "ERROR")

    def test_empty_inventory_is_400_without_run(self):
        r = self.client.post("/generate-dinner")

        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["error"], "No items in stock")
        self.assertIn("In stock = true", r.json()["message"])
        self.assertEqual(self.runs(), [])
        self.assertEqual(self.completion.calls, [])

    def test_post_only(self):
        r = self.client.get("/generate-dinner")
        self.assertEqual(r.status_code, 405)
        self.assertEqual(r.json(), {"success": False, "error": "POST only"})

    def test_missing_configuration(self):
        client = self._client(make_settings(PROMPT_TEMPLATE="", OPENAI_API_KEY=""))
        r = client.post("/generate-dinner")
        self.assertEqual(r.status_code, 500)
        self.assertIn("PROMPT_TEMPLATE", r.json()["error"])
        self.assertIn("OPENAI_API_KEY", r.json()["error"])


class TestCookMeal(DinnerRoutesTestCase):
    def test_cook_after_generate(self):
        chicken = self.add_chicken()
        self.client.post("/generate-dinner")

        r = self.client.post("/cook-meal", params={"meal_id": "M1"})
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["meal"], "Chicken stir fry")
        self.assertEqual(body["used"], ["I-1"])
        self.assertEqual(body["updated"], 1)

        record = self.store.get(chicken.id)
        self.assertFalse(record.checkbox("In stock"))
        self.assertEqual(record.date("Last used"), TODAY)

        again = self.client.post("/cook-meal", params={"meal_id": "M1"})
        self.assertEqual(again.status_code, 200)
        self.assertEqual(again.json()["updated"], 0)

    def test_meal_id_validation(self):
        for params in ({}, {"meal_id": "M9"}):
            r = self.client.post("/cook-meal", params=params)
            self.assertEqual(r.status_code, 400)
            self.assertFalse(r.json()["success"])

    def test_cook_with_malformed_sibling_meal(self):
        chicken = self.add_chicken()
        meal_json = (
            '{"meals":[{"id":"M1","title":"Chicken stir fry","items":["I-1"]},'
            '{"id":"M2","title":"Toast","items":"I-2"}]}'
        )
        self.completion.text = REPLY.replace(MEAL_JSON, meal_json)
        self.assertEqual(self.client.post("/generate-dinner").status_code, 200)

        r = self.client.post("/cook-meal", params={"meal_id": "M1"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["used"], ["I-1"])
        self.assertFalse(self.store.get(chicken.id).checkbox("In stock"))

        r = self.client.post("/cook-meal", params={"meal_id": "M2"})
        self.assertEqual(r.status_code, 400)
        self.assertIn("No items", r.json()["error"])

    def test_no_run_found(self):
        r = self.client.post("/cook-meal", params={"meal_id": "M1"})
        self.assertEqual(r.status_code, 400)
        self.assertIn("No run found", r.json()["error"])

    def test_meal_not_found(self):
        self.add_chicken()
        self.client.post("/generate-dinner")
        r = self.client.post("/cook-meal", params={"meal_id": "M2"})
        self.assertEqual(r.status_code, 400)
        self.assertIn("Meal not found", r.json()["error"])

    def test_latest_run_is_an_error_run(self):
        self.add_chicken()
        self.client.post("/generate-dinner")
        self.completion.text = "no json"
        self.client.post("/generate-dinner")

        r = self.client.post("/cook-meal", params={"meal_id": "M1"})
        self.assertEqual(r.status_code, 400)

    def test_invalid_stored_json(self):
        self.store.create_record("runs", {"Raw JSON": ds.rich_text('{"meals": [')})
        r = self.client.post("/cook-meal", params={"meal_id": "M1"})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["error"], "AI JSON invalid")

    def test_no_items(self):
        self.store.create_record("runs", {"Raw JSON": ds.rich_text('{"meals": [{"id": "M1", "items": []}]}')})
        r = self.client.post("/cook-meal", params={"meal_id": "M1"})
        self.assertEqual(r.status_code, 400)
        self.assertIn("No items", r.json()["error"])

    def test_post_only(self):
        r = self.client.delete("/cook-meal")
        self.assertEqual(r.status_code, 405)

    def test_head_and_options_are_post_only(self):
        for path in ("/generate-dinner", "/cook-meal"):
            self.assertEqual(self.client.head(path).status_code, 405)
            r = self.client.options(path)
            self.assertEqual(r.status_code, 405)
            self.assertEqual(r.json(), {"success": False, "error": "POST only"})


class TestHealth(DinnerRoutesTestCase):
    def test_health(self):
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()
