"""
Referral resource CSV import

Spreadsheet exports use display headers ("Resource Name", "Active / Inactive");
they are mapped onto stored field names. Unknown columns are ignored.
"""
import base64
import binascii
import csv
import io
from typing import Dict, Any, List, Tuple

CSV_COLUMN_MAP = {
    "Resource Name": "resource_name",
    "Service Category": "service_category",
    "Key Offerings": "key_offerings",
    "Eligibility Criteria": "eligibility_criteria",
    "Languages Spoken": "languages_spoken",
    "Target Population": "target_population",
    "Operation Hours": "operation_hours",
    "Contact Phone": "contact_phone",
    "Contact Email": "contact_email",
    "Address": "address",
    "Website": "website",
    "SPA": "spa",
    "Active / Inactive": "active",
}


def decode_csv_payload(csv_data: str) -> str:
    """
    Decode base64 CSV text

    Raises:
        ValueError: If the payload is not valid base64 UTF-8
    """
    try:
        return base64.b64decode(csv_data, validate=True).decode("utf-8-sig")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise ValueError(f"csv_data must be base64-encoded UTF-8 text: {exc}")


def _field_for(header: str) -> str:
    header = (header or "").strip()
    if header in CSV_COLUMN_MAP:
        return CSV_COLUMN_MAP[header]
    snake = header.lower().replace(" ", "_")
    return snake if snake in CSV_COLUMN_MAP.values() else ""


def _parse_active(value: str) -> bool:
    return value.strip().lower() not in ("unchecked", "inactive", "false", "no", "0")


def parse_resources_csv(text: str) -> Tuple[List[Dict[str, Any]], int]:
    """
    Parse resource rows from CSV text with a header row

    Rows without a resource name are skipped. Resources default to active.

    Returns:
        (resources, skipped_count)
    """
    reader = csv.DictReader(io.StringIO(text))
    resources = []
    skipped = 0
    for row in reader:
        resource: Dict[str, Any] = {"active": True}
        for header, value in row.items():
            field = _field_for(header)
            if not field or value is None or not str(value).strip():
                continue
            value = str(value).strip()
            resource[field] = _parse_active(value) if field == "active" else value
        if not resource.get("resource_name"):
            skipped += 1
            continue
        resources.append(resource)
    return resources, skipped
