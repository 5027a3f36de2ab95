import io
import re

from fastapi.testclient import TestClient
from openpyxl import load_workbook

from agentchat.main import app

client = TestClient(app)


def test_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["health"] == "/healthz"


def test_list_personalities():
    response = client.get("/api/personalities")
    assert response.status_code == 200
    data = response.json()
    assert data["default"] == "elon"
    assert [p["id"] for p in data["personalities"]] == ["elon", "trump", "gensler", "peewee", "rambo"]
    assert "system_prompt" not in data["personalities"][0]


def test_personality_detail_falls_back():
    response = client.get("/api/personalities/unknown")
    assert response.status_code == 200
    assert response.json()["id"] == "elon"
    assert "system_prompt" in response.json()


def test_chains():
    response = client.get("/api/chains")
    data = response.json()
    assert data["default"] == 84532
    base = next(chain for chain in data["chains"] if chain["id"] == 8453)
    assert base["explorer"] == "https://basescan.org"


def test_export_csv_download():
    response = client.post("/api/export", json={
        "records": [{"hash": "0x1", "from": "0xa", "to": "0xb", "isSuccessful": True}],
        "recordType": "transactions",
        "network": "base",
        "format": "csv",
    })
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    disposition = response.headers["content-disposition"]
    assert re.match(r'attachment; filename="transactions_base_\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}\.csv"', disposition)
    header, row = response.text.split("\n")
    assert header.startswith("TransactionHash,From,To,Value")
    assert row.startswith("0x1,0xa,0xb,0,")
    assert ",Success," in row


def test_export_xlsx_download():
    response = client.post("/api/export", json={
        "records": [{"symbol": "USDC", "balance": "5"}],
        "recordType": "token-balances",
        "network": "ethereum",
        "format": "XLSX",
        "includeMetadata": False,
    })
    assert response.status_code == 200
    workbook = load_workbook(io.BytesIO(response.content))
    assert workbook.sheetnames == ["Data"]


def test_export_rejects_unknown_format():
    response = client.post("/api/export", json={
        "records": [],
        "recordType": "transactions",
        "network": "base",
        "format": "docx",
    })
    assert response.status_code == 400
    assert "Unsupported export format" in response.json()["detail"]


def test_export_non_ascii_network_gets_encoded_filename():
    response = client.post("/api/export", json={
        "records": [{"tokenAddress": "0x1", "balance": "5"}],
        "recordType": "token-balances",
        "network": "以太坊",
        "format": "csv",
    })
    assert response.status_code == 200
    disposition = response.headers["content-disposition"]
    assert re.match(r'attachment; filename="token-balances____\d{4}-', disposition)
    assert "filename*=UTF-8''token-balances_%E4%BB%A5%E5%A4%AA%E5%9D%8A_" in disposition


def test_export_filename_with_quote_stays_one_header_value():
    response = client.post("/api/export", json={
        "records": [{"tokenAddress": "0x1", "balance": "5"}],
        "recordType": "token-balances",
        "network": "base",
        "format": "csv",
        "filename": 'x".csv',
    })
    assert response.status_code == 200
    assert response.headers["content-disposition"] == (
        'attachment; filename="x\\".csv"; filename*=UTF-8\'\'x%22.csv'
    )
