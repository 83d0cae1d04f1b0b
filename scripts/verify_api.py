import sys

import requests

BASE_URL = "http://127.0.0.1:8000"


def verify_generate():
    print("\n--- Generating dinner plan ---")
    try:
        response = requests.post(f"{BASE_URL}/generate-dinner", timeout=120)
    except requests.RequestException as e:
        print(f"❌ Connection Failed: {e}")
        return False

    data = response.json()
    if response.status_code == 200:
        print("✅ Plan generated")
        print(f"Date: {data.get('dateLine')}")
        for i, meal in enumerate(data.get("meals", []), start=1):
            print(f" M{i}: {meal}")
        print(f"Encouragement: {data.get('encouragement')}")
        return True

    print(f"❌ {response.status_code}: {data.get('error')}")
    return False


def verify_cook(meal_id):
    print(f"\n--- Cooking {meal_id} ---")
    try:
        response = requests.post(f"{BASE_URL}/cook-meal", params={"meal_id": meal_id}, timeout=60)
    except requests.RequestException as e:
        print(f"❌ Connection Failed: {e}")
        return False

    data = response.json()
    if response.status_code == 200:
        print(f"✅ {data.get('message')}")
        print(f"Requested: {data.get('used')} | Updated: {data.get('updated')}")
        return True

    print(f"❌ {response.status_code}: {data.get('error')}")
    return False


if __name__ == "__main__":
    meal_id = sys.argv[1] if len(sys.argv) > 1 else "M1"
    if verify_generate():
        verify_cook(meal_id)
        # Second call should update nothing: items are no longer in stock
        verify_cook(meal_id)
