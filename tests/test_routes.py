"""
HTTP contract of the document routes, driven through the ASGI app.
"""
from tests.conftest import LEASE_TEXT

PDF_BYTES = b"%PDF-1.4 lease"


async def upload(client, content=PDF_BYTES, filename="lease.pdf", **data):
    return await client.post(
        "/api/upload",
        files={"pdfFile": (filename, content, "application/pdf")},
        data=data,
    )


async def test_upload_returns_summary_and_session_id(async_client, store):
    response = await upload(async_client)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Summary: this is a lease agreement."
    assert await store.get(body["sessionId"]) == LEASE_TEXT


async def test_upload_translates_summary(async_client):
    response = await upload(async_client, language="hi")

    assert response.json()["message"] == "[hi] Summary: this is a lease agreement."


async def test_upload_without_file_is_400(async_client):
    response = await async_client.post("/api/upload")

    assert response.status_code == 400
    assert response.json() == {"error": "No PDF file uploaded."}


async def test_upload_wrong_extension_is_400(async_client, store):
    response = await upload(async_client, filename="lease.txt")

    assert response.status_code == 400
    assert await store.count() == 0


async def test_corrupted_pdf_is_400_and_creates_no_session(async_client, store):
    response = await upload(async_client, content=b"not really a pdf")

    assert response.status_code == 400
    assert "re-save it" in response.json()["error"]
    assert await store.count() == 0


async def test_chat_answers_from_stored_document(async_client, answerer):
    session_id = (await upload(async_client)).json()["sessionId"]

    response = await async_client.post("/api/chat", json={"sessionId": session_id, "question": "What is the rent?"})

    assert response.status_code == 200
    assert response.json() == {"message": "Answer to: What is the rent?"}
    assert answerer.calls[-1] == (LEASE_TEXT, "What is the rent?")


async def test_chat_with_bogus_session_is_404(async_client):
    response = await async_client.post("/api/chat", json={"sessionId": "bogus-id", "question": "What is the rent?"})

    assert response.status_code == 404
    assert "expired or is invalid" in response.json()["error"]


async def test_chat_after_expiry_is_404(async_client, clock):
    session_id = (await upload(async_client)).json()["sessionId"]
    clock.advance(30 * 60)

    response = await async_client.post("/api/chat", json={"sessionId": session_id, "question": "What is the rent?"})

    assert response.status_code == 404


async def test_chat_missing_fields_is_400(async_client):
    response = await async_client.post("/api/chat", json={"question": "What is the rent?"})

    assert response.status_code == 400
    assert response.json() == {"error": "Session ID and question are required."}


async def test_chat_provider_failure_is_500_without_provider_details(async_client, answerer):
    session_id = (await upload(async_client)).json()["sessionId"]

    async def broken(document_text, question=None):
        raise RuntimeError("upstream said: invalid api key sk-123")

    answerer.generate = broken

    response = await async_client.post("/api/chat", json={"sessionId": session_id, "question": "What is the rent?"})

    assert response.status_code == 500
    assert "sk-123" not in response.text


async def test_delete_session_then_chat_is_404(async_client):
    session_id = (await upload(async_client)).json()["sessionId"]

    first = await async_client.delete(f"/api/session/{session_id}")
    second = await async_client.delete(f"/api/session/{session_id}")
    chat = await async_client.post("/api/chat", json={"sessionId": session_id, "question": "What is the rent?"})

    assert first.status_code == 200
    assert second.status_code == 200
    assert chat.status_code == 404


async def test_health_reports_active_sessions(async_client):
    await upload(async_client)
    await upload(async_client)

    response = await async_client.get("/api/health")

    assert response.json() == {"status": "ok", "active_sessions": 2}


async def test_languages_lists_catalogue(async_client):
    body = (await async_client.get("/api/languages")).json()

    assert body["default"] == "en"
    assert body["languages"]["hi"] == "Hindi"


async def test_chat_with_non_string_question_is_400_without_echo(async_client):
    response = await async_client.post("/api/chat", json={"sessionId": "abc", "question": 123})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request body."}
    assert "123" not in response.text


async def test_chat_with_invalid_json_is_400(async_client):
    response = await async_client.post(
        "/api/chat",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request body."}


async def test_upload_summary_failure_drops_the_session(async_client, answerer, store):
    async def broken(document_text, question=None):
        raise RuntimeError("provider down")

    answerer.generate = broken

    response = await upload(async_client)

    assert response.status_code == 500
    assert "sessionId" not in response.json()
    assert await store.count() == 0


async def test_oversized_upload_is_rejected_before_reading(async_client, store, monkeypatch):
    from starlette.datastructures import UploadFile

    async def fail_read(self, size=-1):
        raise AssertionError("upload body should not be read")

    monkeypatch.setattr(UploadFile, "read", fail_read)

    response = await upload(async_client, content=b"%PDF" + b"x" * (1024 * 1024))

    assert response.status_code == 400
    assert response.json() == {"error": "File size limit exceeded."}
    assert await store.count() == 0
