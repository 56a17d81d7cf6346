from __future__ import annotations
import pytest
from mentor_admin.errors import InvalidStatus, ScoreOutOfRange, NoteTooLong
from mentor_admin.models.submission import Submission
from mentor_admin.services.review import check_review, apply_review

STAFF = {"X-Staff-Id": "7f1d2c3b-0000-4000-8000-000000000001"}


# ---------- pure rules ----------

@pytest.mark.parametrize("status", ["PENDING", "approved", "", "DONE"])
def test_only_terminal_statuses_accepted(status):
    with pytest.raises(InvalidStatus):
        check_review(status, None, None, max_score=100)


def test_score_bounds_are_inclusive():
    check_review("APPROVED", 0, None, max_score=100)
    check_review("APPROVED", 100, None, max_score=100)
    with pytest.raises(ScoreOutOfRange) as exc:
        check_review("APPROVED", 101, None, max_score=100)
    assert exc.value.details["max"] == 100
    with pytest.raises(ScoreOutOfRange):
        check_review("REJECTED", -1, None, max_score=100)


def test_note_length_limit():
    check_review("APPROVED", None, "x" * 500, max_score=10)
    with pytest.raises(NoteTooLong):
        check_review("APPROVED", None, "x" * 501, max_score=10)


def test_apply_review_keeps_unsupplied_fields():
    s = Submission(status="APPROVED", score=40, review_note="Nice")
    apply_review(s, "REJECTED", None, "", None)
    assert (s.status, s.score, s.review_note) == ("REJECTED", 40, "Nice")
    assert s.reviewed_at is not None


# ---------- over HTTP ----------

async def _pending_submission(make_challenge, make_task, make_teen, submit, max_score=100):
    ch = await make_challenge()
    task = await make_task(ch["id"], "TEXT", maxScore=max_score)
    teen = await make_teen()
    return await submit(task["id"], teen, {"text": "done"})


@pytest.mark.asyncio
async def test_review_sets_status_score_note_and_reviewer(client, make_challenge, make_task, make_teen, submit):
    s = await _pending_submission(make_challenge, make_task, make_teen, submit)
    assert s["status"] == "PENDING"
    r = await client.patch(f"/submissions/{s['id']}/review",
                           json={"status": "APPROVED", "score": 80, "reviewNote": "Great"}, headers=STAFF)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["status"] == "APPROVED" and body["score"] == 80 and body["reviewNote"] == "Great"
    assert body["reviewedBy"] == STAFF["X-Staff-Id"]
    assert body["reviewedAt"]


@pytest.mark.asyncio
async def test_score_above_max_is_rejected(client, make_challenge, make_task, make_teen, submit):
    s = await _pending_submission(make_challenge, make_task, make_teen, submit, max_score=10)
    r = await client.patch(f"/submissions/{s['id']}/review", json={"status": "APPROVED", "score": 11})
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "SCORE_OUT_OF_RANGE"
    # nothing was written
    d = (await client.get(f"/submissions/{s['id']}")).json()
    assert d["status"] == "PENDING" and d["score"] is None


@pytest.mark.asyncio
async def test_invalid_status_and_long_note(client, make_challenge, make_task, make_teen, submit):
    s = await _pending_submission(make_challenge, make_task, make_teen, submit)
    r = await client.patch(f"/submissions/{s['id']}/review", json={"status": "PENDING"})
    assert r.status_code == 422 and r.json()["error"]["code"] == "INVALID_STATUS"
    r = await client.patch(f"/submissions/{s['id']}/review", json={"status": "APPROVED", "reviewNote": "x" * 501})
    assert r.status_code == 422 and r.json()["error"]["code"] == "NOTE_TOO_LONG"


@pytest.mark.asyncio
async def test_unknown_submission(client):
    r = await client.patch("/submissions/00000000-0000-4000-8000-000000000000/review", json={"status": "APPROVED"})
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "SUBMISSION_NOT_FOUND"


@pytest.mark.asyncio
async def test_approve_then_quick_reject_preserves_score_and_note(client, make_challenge, make_task, make_teen, submit):
    s = await _pending_submission(make_challenge, make_task, make_teen, submit)
    r = await client.patch(f"/submissions/{s['id']}/review", json={"status": "APPROVED", "score": 70, "reviewNote": "Good"})
    assert r.status_code == 200
    r = await client.post(f"/submissions/{s['id']}/reject")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "REJECTED"
    assert body["score"] == 70 and body["reviewNote"] == "Good"
    r = await client.post(f"/submissions/{s['id']}/approve")
    assert r.json()["status"] == "APPROVED" and r.json()["score"] == 70


@pytest.mark.asyncio
async def test_review_queue_filters(client, make_challenge, make_task, make_teen, submit):
    ch = await make_challenge()
    task = await make_task(ch["id"], "TEXT")
    teen = await make_teen()
    a = await submit(task["id"], teen, {"text": "a"})
    b = await submit(task["id"], teen, {"text": "b"})
    await client.post(f"/submissions/{a['id']}/approve")

    pending = (await client.get("/submissions/review-queue")).json()
    assert [x["id"] for x in pending] == [b["id"]]
    assert pending[0]["task"]["id"] == task["id"] and pending[0]["teen"]["id"] == teen

    every = (await client.get("/submissions/review-queue", params={"status": "all", "challengeId": ch["id"]})).json()
    assert {x["id"] for x in every} == {a["id"], b["id"]}

    approved = (await client.get("/submissions/review-queue", params={"status": "APPROVED"})).json()
    assert [x["id"] for x in approved] == [a["id"]]

    r = await client.get("/submissions/review-queue", params={"limit": 0})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_submission_detail_renders_content(client, make_challenge, make_task, make_teen, submit):
    ch = await make_challenge()
    task = await make_task(ch["id"], "PICK_ONE", {"options": ["Serve", "Give"]})
    teen = await make_teen()
    s = await submit(task["id"], teen, {"selectedOption": task["options"]["options"][0]["id"]})
    d = (await client.get(f"/submissions/{s['id']}")).json()
    assert d["rendered"]["taskType"] == "PICK_ONE"
    assert d["rendered"]["entries"] == [{"label": "Selected option", "value": "Serve"}]
    assert d["contentError"] is None


@pytest.mark.asyncio
async def test_intake_rejects_bad_content_and_unknown_refs(client, make_challenge, make_task, make_teen):
    ch = await make_challenge()
    task = await make_task(ch["id"], "CHECKLIST", {"items": ["Pray"]})
    teen = await make_teen()
    r = await client.post("/submissions", json={"taskId": task["id"], "teenId": teen, "content": {"answers": {}}})
    assert r.status_code == 422 and r.json()["error"]["code"] == "MISSING_CONTENT"
    r = await client.post("/submissions", json={"taskId": task["id"], "teenId": ch["id"], "content": {"checkedItems": []}})
    assert r.status_code == 404 and r.json()["error"]["code"] == "TEEN_NOT_FOUND"
