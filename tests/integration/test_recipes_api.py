from recipe_assistant.services.exceptions import UpstreamError, UpstreamTimeoutError

from conftest import recipes_reply

PB_COOKIES = {
    "name": "Peanut Butter Cookies",
    "description": "Chewy cookies.",
    "prepTime": "10 minutes",
    "cookTime": "12 minutes",
    "difficulty": "Easy",
    "servings": 12,
    "ingredients": ["2 cups flour", "1/2 cup peanut butter"],
    "instructions": ["Mix.", "Bake."],
    "allergenWarning": "None",
    "dietaryTags": ["vegetarian"],
}
PANCAKES = {
    "name": "Pancakes",
    "ingredients": ["2 cups flour", "1 egg"],
    "instructions": ["Whisk.", "Fry."],
}


def _setup_profile(client, allergies=("peanut",)):
    client.put("/api/profile", json={"name": "Sam", "preferences": {"allergies": list(allergies)}})


def test_generate_requires_profile(client):
    resp = client.post("/api/generate-recipes", json={"ingredients": []})
    assert resp.status_code == 404
    assert resp.json() == {
        "success": False,
        "error": "No profile found. Set up your profile before generating recipes.",
        "kind": "NotFoundError",
    }


def test_generate_flags_unsafe_recipes(client, completer):
    _setup_profile(client)
    completer.reply = recipes_reply(PB_COOKIES, PANCAKES, fenced=True)

    resp = client.post("/api/generate-recipes", json={"ingredients": [{"name": "flour", "quantity": "2 cups"}]})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["userProfile"]["name"] == "Sam"
    cookies, pancakes = body["recipes"]
    assert cookies["isSafe"] is False
    assert "peanut" in cookies["allergenWarning"]
    assert cookies["difficulty"] == "easy"
    assert pancakes["isSafe"] is True
    assert pancakes["allergenWarning"] == "None"
    assert "1. flour (2 cups)" in completer.prompts[0]


def test_generate_uses_stored_pantry_when_no_ingredients_given(client, completer):
    _setup_profile(client, allergies=())
    client.post("/api/pantry/items", json=[{"name": "tofu", "quantity": "1 block"}])
    completer.reply = recipes_reply(PANCAKES)

    resp = client.post("/api/generate-recipes", json={})
    assert resp.status_code == 200
    assert "1. tofu (1 block)" in completer.prompts[0]
    assert resp.json()["recipes"][0]["isSafe"] is True


def test_generate_reports_unparseable_model_output(client, completer):
    _setup_profile(client)
    completer.reply = "Here are some recipes you might like!"

    resp = client.post("/api/generate-recipes", json={"ingredients": []})
    assert resp.status_code == 422
    body = resp.json()
    assert body["success"] is False
    assert body["kind"] == "AIFormatError"
    assert body["raw"] == "Here are some recipes you might like!"


def test_generate_reports_upstream_failures(client, completer):
    _setup_profile(client)
    completer.error = UpstreamError("OpenAI request failed: connection refused")
    resp = client.post("/api/generate-recipes", json={"ingredients": []})
    assert resp.status_code == 502
    assert resp.json()["kind"] == "UpstreamError"

    completer.error = UpstreamTimeoutError("OpenAI request timed out after 60.0s")
    resp = client.post("/api/generate-recipes", json={"ingredients": []})
    assert resp.status_code == 504
    assert resp.json()["kind"] == "UpstreamTimeoutError"


def test_save_list_and_delete_recipes(client):
    first = client.post("/api/recipes/save", json=PANCAKES)
    assert first.status_code == 200
    saved = first.json()["recipe"]
    assert saved["recipeId"].startswith("pancakes-")
    assert "savedAt" in saved

    second = client.post("/api/recipes/save", json=PB_COOKIES).json()["recipe"]

    listed = client.get("/api/recipes/saved").json()["recipes"]
    assert [r["recipeId"] for r in listed] == [second["recipeId"], saved["recipeId"]]

    resp = client.delete(f"/api/recipes/save/{saved['recipeId']}")
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert [r["name"] for r in client.get("/api/recipes/saved").json()["recipes"]] == ["Peanut Butter Cookies"]

    resp = client.delete(f"/api/recipes/save/{saved['recipeId']}")
    assert resp.status_code == 404


def test_save_requires_name(client):
    resp = client.post("/api/recipes/save", json={"ingredients": ["water"]})
    assert resp.status_code == 400
    assert resp.json()["kind"] == "ValidationError"


def test_unsave_by_name(client):
    client.post("/api/recipes/save", json=PANCAKES)
    resp = client.post("/api/recipes/unsave", json={"name": "pancakes"})
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "removed": 1}
    assert client.get("/api/recipes/saved").json()["recipes"] == []
    assert client.post("/api/recipes/unsave", json={"name": "pancakes"}).status_code == 404


def test_malformed_body_gets_failure_envelope(client):
    resp = client.post("/api/recipes/save", json={"name": None})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["kind"] == "ValidationError"
    assert body["error"].startswith("Invalid request: name:")

    resp = client.post("/api/generate-recipes", json={"ingredients": "flour"})
    assert resp.status_code == 400
    assert resp.json()["kind"] == "ValidationError"
