"""
Google Sheets setup for the Tournament Sheet Dashboard.
Checks the spreadsheet is reachable and writes the header row if the first tab is empty.

Run from services/api:
    python setup_sheet.py
"""

from adapters.sheets import _sa_client_from_json_or_path
from core.header_mapping import map_headers, GAME_FIELDS
from settings import get_settings

# Default header row for a new schedule sheet
DEFAULT_HEADERS = [
    "Fase",
    "Jogo",
    "Confronto",
    "Data",
    "Dia",
    "Horário",
    "Quadra",
    "Placar ao Vivo",
]


def main() -> int:
    settings = get_settings()
    sa_json = settings.resolved_google_credentials()

    print("🔧 Checking dashboard spreadsheet...")
    print(f"📄 Spreadsheet ID: {settings.sheets_spreadsheet_id}\n")

    if not sa_json or not settings.sheets_spreadsheet_id:
        print("✗ Set SHEETS_SPREADSHEET_ID and a service account (GOOGLE_CREDENTIALS / GOOGLE_SA_JSON)")
        return 1

    try:
        gc = _sa_client_from_json_or_path(sa_json)
        spreadsheet = gc.open_by_key(settings.sheets_spreadsheet_id)
        print(f"✓ Connected to spreadsheet: '{spreadsheet.title}'\n")
    except Exception as e:
        print(f"✗ Failed to connect: {e}")
        return 1

    worksheet = spreadsheet.sheet1
    existing_headers = worksheet.row_values(1)

    if not existing_headers:
        print(f"📝 Sheet '{worksheet.title}' is empty, writing headers...")
        range_end = chr(ord('A') + len(DEFAULT_HEADERS) - 1)
        worksheet.update(values=[DEFAULT_HEADERS], range_name=f'A1:{range_end}1')
        existing_headers = DEFAULT_HEADERS
        print("  ✓ Headers written")
    else:
        print(f"✓ Sheet '{worksheet.title}' has headers: {existing_headers}")

    mapping = map_headers(existing_headers)
    print("\n📋 Column mapping:")
    for field in GAME_FIELDS:
        if field in mapping:
            print(f"   ✓ {field:<11} → column {mapping[field] + 1} ('{existing_headers[mapping[field]]}')")
        else:
            print(f"   ⚠️  {field:<11} → not found (will not be written)")

    print("\n✨ Done. Start the server with: uvicorn main:create_app --factory --port 3000")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
