import pytest


def create(client, value):
    res = client.post("/api/todos", json={"value": value})
    assert res.status_code == 201
    return res.json()["todo"]


def list_todos(client):
    res = client.get("/api/todos")
    assert res.status_code == 200
    return res.json()["todos"]


def assert_todo_shape(todo: dict):
    assert set(todo) == {"id", "value", "order", "doneAt"}
    assert isinstance(todo["id"], str) and todo["id"]
    assert isinstance(todo["value"], str)
    assert isinstance(todo["order"], int)


class TestCreate:
    def test_first_todo_gets_order_one(self, client):
        todo = create(client, "buy milk")
        assert_todo_shape(todo)
        assert todo["value"] == "buy milk"
        assert todo["order"] == 1
        assert todo["doneAt"] is None

    def test_order_is_one_above_current_max(self, client, repo):
        repo.insert(value="seeded", order=7)
        todo = create(client, "next")
        assert todo["order"] == 8

    def test_ids_are_unique(self, client):
        ids = {create(client, f"task {i}")["id"] for i in range(5)}
        assert len(ids) == 5

    @pytest.mark.parametrize("value", ["x", "a" * 50, "  spaced  "])
    def test_accepts_boundary_lengths(self, client, value):
        todo = create(client, value)
        assert todo["value"] == value

    @pytest.mark.parametrize("value", ["", "a" * 51])
    def test_rejects_bad_length_without_storing(self, client, value):
        res = client.post("/api/todos", json={"value": value})
        assert res.status_code == 400
        body = res.json()
        assert set(body) == {"errorMessage"}
        assert body["errorMessage"].startswith("value: ")
        assert list_todos(client) == []

    def test_rejects_missing_value(self, client):
        res = client.post("/api/todos", json={})
        assert res.status_code == 400
        assert "value" in res.json()["errorMessage"]

    def test_rejects_non_string_value(self, client):
        res = client.post("/api/todos", json={"value": 42})
        assert res.status_code == 400
        assert list_todos(client) == []

    def test_rejects_missing_body(self, client):
        res = client.post("/api/todos")
        assert res.status_code == 400
        assert res.json() == {"errorMessage": "body: Field required"}

    def test_rejects_form_encoded_body(self, client):
        res = client.post("/api/todos", data={"value": "buy milk"})
        assert res.status_code == 400
        assert set(res.json()) == {"errorMessage"}
        assert list_todos(client) == []


class TestList:
    def test_empty(self, client):
        assert list_todos(client) == []

    def test_sorted_by_order_descending(self, client, repo):
        for order in (3, 9, 1, 5):
            repo.insert(value=f"o{order}", order=order)
        orders = [t["order"] for t in list_todos(client)]
        assert orders == [9, 5, 3, 1]


class TestUpdate:
    def test_updates_value(self, client):
        todo = create(client, "old")
        res = client.patch(f"/api/todos/{todo['id']}", json={"value": "new"})
        assert res.status_code == 200
        assert res.json() == {}
        assert list_todos(client)[0]["value"] == "new"

    def test_empty_value_is_ignored(self, client):
        todo = create(client, "keep")
        res = client.patch(f"/api/todos/{todo['id']}", json={"value": ""})
        assert res.status_code == 200
        assert list_todos(client)[0]["value"] == "keep"

    def test_order_swap_touches_only_two_todos(self, client):
        a = create(client, "a")
        b = create(client, "b")
        c = create(client, "c")
        res = client.patch(f"/api/todos/{a['id']}", json={"order": 3})
        assert res.status_code == 200
        orders = {t["id"]: t["order"] for t in list_todos(client)}
        assert orders == {a["id"]: 3, b["id"]: 2, c["id"]: 1}

    def test_order_to_free_slot_moves_only_that_todo(self, client):
        a = create(client, "a")
        b = create(client, "b")
        client.patch(f"/api/todos/{a['id']}", json={"order": 10})
        orders = {t["id"]: t["order"] for t in list_todos(client)}
        assert orders == {a["id"]: 10, b["id"]: 2}

    def test_order_zero_is_treated_as_no_change(self, client):
        a = create(client, "a")
        client.patch(f"/api/todos/{a['id']}", json={"order": 0})
        assert list_todos(client)[0]["order"] == 1

    def test_done_true_then_false(self, client):
        todo = create(client, "finish")
        client.patch(f"/api/todos/{todo['id']}", json={"done": True})
        assert list_todos(client)[0]["doneAt"] is not None

        client.patch(f"/api/todos/{todo['id']}", json={"done": False})
        assert list_todos(client)[0]["doneAt"] is None

    def test_omitting_done_keeps_completion(self, client):
        todo = create(client, "finish")
        client.patch(f"/api/todos/{todo['id']}", json={"done": True})
        done_at = list_todos(client)[0]["doneAt"]

        client.patch(f"/api/todos/{todo['id']}", json={"value": "renamed"})
        assert list_todos(client)[0]["doneAt"] == done_at

    def test_explicit_null_done_clears_completion(self, client):
        todo = create(client, "finish")
        client.patch(f"/api/todos/{todo['id']}", json={"done": True})
        client.patch(f"/api/todos/{todo['id']}", json={"done": None})
        assert list_todos(client)[0]["doneAt"] is None

    def test_patch_without_body_changes_nothing(self, client):
        todo = create(client, "untouched")
        res = client.patch(f"/api/todos/{todo['id']}")
        assert res.status_code == 200
        assert res.json() == {}
        assert list_todos(client) == [todo]

    def test_not_found(self, client):
        res = client.patch("/api/todos/does-not-exist", json={"value": "x"})
        assert res.status_code == 404
        assert res.json() == {"errorMessage": "Todo does not exist"}


class TestDelete:
    def test_delete_then_404(self, client):
        keep = create(client, "keep")
        gone = create(client, "gone")

        res = client.delete(f"/api/todos/{gone['id']}")
        assert res.status_code == 200
        assert res.json() == {}
        assert [t["id"] for t in list_todos(client)] == [keep["id"]]

        assert client.patch(f"/api/todos/{gone['id']}", json={"done": True}).status_code == 404
        res_again = client.delete(f"/api/todos/{gone['id']}")
        assert res_again.status_code == 404
        assert res_again.json() == {"errorMessage": "Todo does not exist"}


class TestScenario:
    def test_create_swap_and_list(self, client):
        res = client.post("/api/todos", json={"value": "buy milk"})
        assert res.status_code == 201
        milk = res.json()["todo"]
        assert {k: milk[k] for k in ("value", "order", "doneAt")} == {
            "value": "buy milk",
            "order": 1,
            "doneAt": None,
        }

        dog = create(client, "walk dog")
        assert dog["order"] == 2

        res = client.patch(f"/api/todos/{milk['id']}", json={"order": 2})
        assert res.status_code == 200

        todos = list_todos(client)
        assert [(t["value"], t["order"]) for t in todos] == [("buy milk", 2), ("walk dog", 1)]
