import json

import pandas as pd

from lease_abstraction.export import flatten_record, to_dataframe, to_excel, to_json

RECORD = {
    "generalInformation": {"tenantName": "Acme Foods", "dba": None},
    "billingAndCharges": {
        "baseRentSchedule": [
            {"effectiveDate": "01/01/2020", "annualTotal": "$120,000.00"},
        ],
    },
    "keyClauses": {"guaranty": {"notes": "Not Provided"}},
}


def test_flatten_record():
    assert flatten_record(RECORD) == [
        ["General Information > Tenant Name", "Acme Foods"],
        ["General Information > Dba", ""],
        ["Billing And Charges > Base Rent Schedule"],
        ["Billing And Charges > Base Rent Schedule [1]"],
        ["   > Effective Date", "01/01/2020"],
        ["   > Annual Total", "$120,000.00"],
        ["Key Clauses > Guaranty > Notes", "Not Provided"],
    ]


def test_to_dataframe_pads_header_rows():
    df = to_dataframe(RECORD)
    assert list(df.columns) == ["Field", "Value"]
    assert df.iloc[2]["Value"] == ""


def test_to_excel_and_json(tmp_path):
    xlsx = tmp_path / "out" / "abstract.xlsx"
    to_excel(RECORD, xlsx)
    sheet = pd.read_excel(xlsx, sheet_name="Lease Abstract", keep_default_na=False)
    assert sheet.iloc[0].tolist() == ["General Information > Tenant Name", "Acme Foods"]

    path = tmp_path / "abstract.json"
    to_json(RECORD, path)
    assert json.loads(path.read_text(encoding="utf-8")) == RECORD


def test_scalar_array_items_get_their_own_rows():
    rows = flatten_record({"leaseAbstract": {"tags": ["retail", None, 5]}})
    assert rows == [
        ["Lease Abstract > Tags"],
        ["Lease Abstract > Tags [1]", "retail"],
        ["Lease Abstract > Tags [2]", ""],
        ["Lease Abstract > Tags [3]", "5"],
    ]
