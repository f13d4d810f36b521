def submit(client, answers, email="alice@example.com", snapshots=None):
    body = {"studentEmail": email, "answers": answers}
    if snapshots is not None:
        body["snapshots"] = snapshots
    return client.post("/api/submission/submit", json=body)


def test_submit_and_list_with_joined_questions(client, make_question):
    q = make_question()
    response = submit(client, [{"questionId": q["id"], "answer": "Paris"}], snapshots=[
        {"image": "data:image/jpeg;base64,AAA", "timestamp": "2025-05-30T10:00:10Z"},
    ])
    assert response.status_code == 200
    assert response.json()["message"] == "Submission successful"

    submissions = client.get("/api/submission/getAll").json()
    assert len(submissions) == 1
    sub = submissions[0]
    assert sub["id"] == response.json()["id"]
    assert sub["studentEmail"] == "alice@example.com"
    assert sub["answers"][0]["question"] == {
        "id": q["id"],
        "questionText": "Capital of France?",
        "correctAnswer": "Paris",
    }
    assert sub["snapshots"][0]["image"] == "data:image/jpeg;base64,AAA"
    assert sub["snapshots"][0]["timestamp"] == "2025-05-30T10:00:10Z"
    assert sub["submittedAt"].endswith("Z")


def test_missing_student_email_is_rejected(client):
    response = client.post("/api/submission/submit", json={"answers": [{"questionId": "q", "answer": "a"}]})
    assert response.status_code == 400
    assert "studentEmail" in response.json()["error"]


def test_non_string_student_email_is_rejected(client):
    response = submit(client, [{"questionId": "q", "answer": "a"}], email=42)
    assert response.status_code == 400


def test_empty_answers_are_rejected(client):
    assert submit(client, []).status_code == 400


def test_answers_must_be_a_list(client):
    response = client.post("/api/submission/submit", json={"studentEmail": "a@b.c", "answers": "Paris"})
    assert response.status_code == 400


def test_malformed_values_are_normalized(client, make_question):
    q = make_question()
    response = submit(
        client,
        [{"questionId": q["id"], "answer": 7}, {"questionId": q["id"]}],
        snapshots=[{"image": None}],
    )
    assert response.status_code == 200

    sub = client.get("/api/submission/getAll").json()[0]
    assert [a["answer"] for a in sub["answers"]] == ["", ""]
    assert sub["snapshots"][0]["image"] == ""
    assert sub["snapshots"][0]["timestamp"]


def test_missing_snapshots_default_to_empty(client):
    submit(client, [{"questionId": "q1", "answer": "a"}])
    assert client.get("/api/submission/getAll").json()[0]["snapshots"] == []


def test_delete_submission_then_redelete_is_404(client):
    submission_id = submit(client, [{"questionId": "q1", "answer": "a"}]).json()["id"]

    response = client.delete(f"/api/submission/delete/{submission_id}")
    assert response.status_code == 200
    assert client.get("/api/submission/getAll").json() == []

    again = client.delete(f"/api/submission/delete/{submission_id}")
    assert again.status_code == 404
    assert again.json() == {"error": "Submission not found"}


def test_deleted_question_surfaces_as_null_and_counts_wrong(client, make_question):
    kept = make_question(questionText="Kept")
    gone = make_question(questionText="Gone")
    submit(client, [
        {"questionId": kept["id"], "answer": "Paris"},
        {"questionId": gone["id"], "answer": "Paris"},
    ])
    client.delete(f"/api/questions/delete/{gone['id']}")

    sub = client.get("/api/submission/getAll").json()[0]
    assert len(sub["answers"]) == 2
    assert sub["answers"][0]["question"]["questionText"] == "Kept"
    assert sub["answers"][1]["question"] is None

    stats = client.get("/api/submission/monitoring").json()[0]["submissions"][0]["stats"]
    assert stats["correctCount"] == 1
    assert stats["wrongCount"] == 1


def test_latest_submission_by_student(client):
    submit(client, [{"questionId": "q1", "answer": "first"}])
    submit(client, [{"questionId": "q1", "answer": "second"}])

    response = client.get("/api/submission/submission/alice@example.com")
    assert response.status_code == 200
    assert response.json()["answers"][0]["answer"] == "second"

    assert client.get("/api/submission/submission/nobody@example.com").status_code == 404


def test_monitoring_groups_by_student_with_scores(client, make_question):
    questions = [make_question(questionText=f"Q{i}") for i in range(9)]
    answers = [{"questionId": q["id"], "answer": "Paris" if i < 5 else "Rome"} for i, q in enumerate(questions)]
    submit(client, answers, email="alice@example.com")
    submit(client, [{"questionId": questions[0]["id"], "answer": ""}], email="bob@example.com")
    submit(client, [{"questionId": questions[0]["id"], "answer": "Paris"}], email="alice@example.com")

    groups = client.get("/api/submission/monitoring").json()
    assert [g["studentEmail"] for g in groups] == ["alice@example.com", "bob@example.com"]
    assert groups[0]["submissionCount"] == 2

    first = groups[0]["submissions"][0]["stats"]
    assert first == {
        "correctCount": 5,
        "wrongCount": 4,
        "totalQuestions": 9,
        "negativeMarks": 1,
        "score": 4,
        "displayScore": 4,
    }
    assert groups[1]["submissions"][0]["stats"]["score"] == 0


def test_submitted_at_offset_is_kept_as_utc(client):
    response = client.post("/api/submission/submit", json={
        "studentEmail": "alice@example.com",
        "answers": [{"questionId": "q1", "answer": "a"}],
        "submittedAt": "2025-05-30T10:00:00+05:00",
    })
    assert response.status_code == 200

    sub = client.get("/api/submission/getAll").json()[0]
    assert sub["submittedAt"] == "2025-05-30T05:00:00Z"


def test_offset_timestamps_order_by_instant(client):
    for stamp, answer in [("2025-05-30T10:00:00+05:00", "later"), ("2025-05-30T04:30:00Z", "earlier")]:
        client.post("/api/submission/submit", json={
            "studentEmail": "alice@example.com",
            "answers": [{"questionId": "q1", "answer": answer}],
            "submittedAt": stamp,
        })

    submissions = client.get("/api/submission/getAll").json()
    assert [s["answers"][0]["answer"] for s in submissions] == ["earlier", "later"]
