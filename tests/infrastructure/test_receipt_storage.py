"""Receipt Storage — verifies simulated uploads never raise."""

from jobbook.infrastructure.receipt_storage import ReceiptStorage


async def _no_sleep(_seconds):
    return None


async def test_existing_file_uploads_to_receipts_folder(tmp_path):
    image = tmp_path / "receipt.jpg"
    image.write_bytes(b"\xff\xd8")
    storage = ReceiptStorage("https://bucket.example/", sleep=_no_sleep)

    result = await storage.upload(f"file://{image}", "expense_1")

    assert result.success
    assert result.url.startswith("https://bucket.example/receipts/receipt_expense_1_")
    assert result.url.endswith(".jpg")


async def test_missing_file_is_a_soft_failure(tmp_path):
    storage = ReceiptStorage("https://bucket.example", sleep=_no_sleep)

    result = await storage.upload(str(tmp_path / "nope.jpg"), "expense_2")

    assert not result.success
    assert result.url is None
    assert result.error == "Local file does not exist"


async def test_delete_always_succeeds():
    storage = ReceiptStorage("https://bucket.example", sleep=_no_sleep)
    assert await storage.delete("https://bucket.example/receipts/x.jpg") is True
