"""
Test fixtures for Gini API payloads.

Endpoints, ids and JSON bodies shaped like the real service's answers:
- documents (GET /documents/{id})
- document lists (GET /documents, GET /search)
- OAuth2 token responses
- extractions
"""

API_URL = "http://api.gini.test"
USER_CENTER_URL = "http://user.gini.test"
TOKEN_URL = f"{USER_CENTER_URL}/oauth/token"

DOCUMENT_ID = "626626a0-749f-11e2-bfd6-000000000000"
DOCUMENT_URL = f"{API_URL}/documents/{DOCUMENT_ID}"
SECOND_DOCUMENT_ID = "626626a0-749f-11e2-abc2-000000000000"
ACCESS_TOKEN = "760822cb-2dec-4275-8da8-fa8f5680e8d4"


def document_json(progress: str = "COMPLETED", doc_id: str = DOCUMENT_ID, **overrides) -> dict:
    """Gini document payload as returned by GET /documents/{id}."""
    doc_url = f"{API_URL}/documents/{doc_id}"
    data = {
        "id": doc_id,
        "name": "invoice.pdf",
        "creationDate": 1360623867402,
        "origin": "UPLOAD",
        "pageCount": 1,
        "pages": [
            {
                "pageNumber": 1,
                "images": {
                    "750x900": f"{doc_url}/pages/1/750x900",
                    "1280x1810": f"{doc_url}/pages/1/1280x1810",
                },
            }
        ],
        "progress": progress,
        "sourceClassification": "SCANNED",
        "_links": {
            "document": doc_url,
            "extractions": f"{doc_url}/extractions",
            "layout": f"{doc_url}/layout",
            "processed": f"{doc_url}/processed",
        },
    }
    data.update(overrides)
    return data


def document_set_json() -> dict:
    """Two documents, as returned by GET /documents."""
    return {
        "totalCount": 2,
        "documents": [
            document_json(),
            document_json(progress="PENDING", doc_id=SECOND_DOCUMENT_ID),
        ],
    }


def token_json() -> dict:
    return {
        "access_token": ACCESS_TOKEN,
        "token_type": "bearer",
        "expires_in": 300,
        "refresh_token": "46463dd6-cdbb-440d-88fc-b10a34f68b26",
    }


def extractions_json() -> dict:
    """Extractions of a paid invoice."""
    amount = {
        "entity": "amount",
        "value": "24.99:EUR",
        "candidates": "amounts",
        "box": {"height": 9.0, "left": 516.0, "page": 1, "top": 588.0, "width": 42.0},
    }
    return {
        "extractions": {
            "amountToPay": amount,
            "iban": {"entity": "iban", "value": "DE22222111117777766666"},
        },
        "candidates": {
            "amounts": [amount, {"entity": "amount", "value": "19.99:EUR"}],
        },
    }
