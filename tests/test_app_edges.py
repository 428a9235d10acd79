import os
import json
import unittest
from unittest import mock

# Fixed service settings before importing app
os.environ["TTT_FIRST_PLAYER"] = "alternate"
os.environ["TTT_THINK_DELAY_MS"] = "0"

from app import app as flask_app  # noqa: E402
import app as app_mod             # noqa: E402


class TestFlaskAPIEdges(unittest.TestCase):
    def setUp(self):
        self.client = flask_app.test_client()

    def _post(self, url, payload):
        return self.client.post(url, data=json.dumps(payload), content_type="application/json")

    def _new(self, **payload):
        r = self._post("/api/new", payload)
        self.assertEqual(r.status_code, 200)
        return r.get_json()["session"]

    def test_given_occupied_cell_when_post_to_move_then_400_with_legal_moves(self):
        sid = self._new()
        self._post("/api/move", {"session": sid, "cell": 4})
        r = self._post("/api/move", {"session": sid, "cell": 4})
        self.assertEqual(r.status_code, 400)
        d = r.get_json()
        self.assertFalse(d["ok"])
        self.assertIn("illegal move", d["error"].lower())
        self.assertEqual(len(d["legalMoves"]), 7)

    def test_given_out_of_range_or_non_integer_cell_then_400(self):
        sid = self._new()
        r = self._post("/api/move", {"session": sid, "cell": 9})
        self.assertEqual(r.status_code, 400)
        self.assertIn("legalMoves", r.get_json())
        for bad in ("4", None, True, 4.5):
            r2 = self._post("/api/move", {"session": sid, "cell": bad})
            self.assertEqual(r2.status_code, 400)
        # nothing was applied
        state = self.client.get(f"/api/state/{sid}").get_json()["state"]
        self.assertEqual(state["history"], [])

    def test_given_missing_or_unknown_session_then_400_or_404(self):
        r = self._post("/api/move", {"cell": 4})
        self.assertEqual(r.status_code, 400)
        r2 = self._post("/api/move", {"session": "deadbeef", "cell": 4})
        self.assertEqual(r2.status_code, 404)
        self.assertFalse(r2.get_json()["ok"])
        self.assertEqual(self.client.get("/api/state/deadbeef").status_code, 404)
        self.assertEqual(self._post("/api/undo", {"session": "deadbeef"}).status_code, 404)
        self.assertEqual(self._post("/api/restart", {"session": "deadbeef"}).status_code, 404)
        self.assertEqual(self._post("/api/undo", {}).status_code, 400)

    def test_given_no_moves_when_undo_then_409(self):
        sid = self._new()
        r = self._post("/api/undo", {"session": sid})
        self.assertEqual(r.status_code, 409)
        d = r.get_json()
        self.assertFalse(d["ok"])
        self.assertIn("undo unavailable", d["error"].lower())

    def test_given_finished_game_when_moving_or_undoing_then_rejected(self):
        sid = self._new()
        for cell in (0, 1, 3):  # the engine wins on its third reply
            self._post("/api/move", {"session": sid, "cell": cell})
        state = self.client.get(f"/api/state/{sid}").get_json()["state"]
        self.assertFalse(state["active"])
        self.assertEqual(self._post("/api/move", {"session": sid, "cell": 8}).status_code, 400)
        self.assertEqual(self._post("/api/undo", {"session": sid}).status_code, 409)

    def test_given_computer_first_when_new_game_then_opening_move_included(self):
        with mock.patch("tictactoe_core.match.best_move", return_value=4):
            r = self._post("/api/new", {"first": "computer"})
        self.assertEqual(r.status_code, 200)
        d = r.get_json()
        self.assertEqual(d["moves"], [{"index": 4, "player": "o"}])
        self.assertEqual(d["state"]["current"], "x")
        self.assertEqual(d["state"]["cells"][4], "o")

        # undo is refused: the human has nothing to take back
        r2 = self._post("/api/undo", {"session": d["session"]})
        self.assertEqual(r2.status_code, 409)

    def test_given_bad_first_value_then_400(self):
        self.assertEqual(self._post("/api/new", {"first": "nobody"}).status_code, 400)
        sid = self._new()
        self.assertEqual(self._post("/api/restart", {"session": sid, "first": 7}).status_code, 400)

    def test_given_explicit_first_when_restarting_then_policy_overridden(self):
        sid = self._new()
        r = self._post("/api/restart", {"session": sid, "first": "human"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.get_json()["state"]["firstPlayer"], "x")

    def test_given_bad_boards_when_analyzing_then_400_or_422(self):
        self.assertEqual(self._post("/api/analyze", {}).status_code, 400)
        self.assertEqual(self._post("/api/analyze", {"cells": "xo"}).status_code, 400)
        self.assertEqual(self._post("/api/analyze", {"cells": "xxx------"}).status_code, 400)
        r = self._post("/api/analyze", {"cells": "xxxoo----"})
        self.assertEqual(r.status_code, 422)
        d = r.get_json()
        self.assertFalse(d["ok"])
        self.assertEqual(d["winner"], "x")
        self.assertEqual(d["line"], [0, 1, 2])

    def test_given_non_object_json_body_when_posting_then_400(self):
        sid = self._new()
        for url in ("/api/new", "/api/move", "/api/undo", "/api/restart", "/api/analyze"):
            for payload in ([1, 2], 5, "x"):
                r = self._post(url, payload)
                self.assertEqual(r.status_code, 400, (url, payload))
                d = r.get_json()
                self.assertFalse(d["ok"])
                self.assertEqual(d["error"], "JSON object required")
        # the session was left untouched
        state = self.client.get(f"/api/state/{sid}").get_json()["state"]
        self.assertEqual(state["history"], [])

    def test_given_empty_body_when_new_game_then_defaults_used(self):
        r = self.client.post("/api/new")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.get_json()["state"]["firstPlayer"], "x")

    def test_given_both_players_won_when_analyzing_then_400(self):
        r = self._post("/api/analyze", {"cells": "xxxooo---"})
        self.assertEqual(r.status_code, 400)
        self.assertIn("both players", r.get_json()["error"])

    def test_given_alternate_first_when_new_and_restart_then_opener_flips(self):
        r = self._post("/api/new", {"first": "alternate"})
        self.assertEqual(r.status_code, 200)
        d = r.get_json()
        self.assertEqual(d["state"]["firstPlayer"], "x")
        with mock.patch("tictactoe_core.match.best_move", return_value=4):
            r2 = self._post("/api/restart", {"session": d["session"], "first": "alternate"})
        self.assertEqual(r2.status_code, 200)
        self.assertEqual(r2.get_json()["state"]["firstPlayer"], "o")
        r3 = self._post("/api/restart", {"session": d["session"], "first": "Alternate"})
        self.assertEqual(r3.get_json()["state"]["firstPlayer"], "x")

    def test_given_single_slot_store_when_creating_repeatedly_then_each_new_game_succeeds(self):
        orig = app_mod.STORE
        app_mod.STORE = app_mod.SessionStore(app_mod._make_match, max_sessions=1)
        try:
            with app_mod.STORE.created() as (held, _):
                sid = self._new()
                self.assertNotIn(held, app_mod.STORE)
            r = self._post("/api/move", {"session": sid, "cell": 4})
            self.assertEqual(r.status_code, 200)
        finally:
            app_mod.STORE = orig

    def test_given_store_capacity_when_exceeded_then_oldest_session_gone(self):
        orig = app_mod.STORE
        app_mod.STORE = app_mod.SessionStore(app_mod._make_match, max_sessions=1)
        try:
            first = self._new()
            second = self._new()
            self.assertEqual(self.client.get(f"/api/state/{first}").status_code, 404)
            self.assertEqual(self.client.get(f"/api/state/{second}").status_code, 200)
        finally:
            app_mod.STORE = orig


if __name__ == "__main__":
    unittest.main()
