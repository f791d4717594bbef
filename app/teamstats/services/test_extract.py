from teamstats.models.member import Member
from teamstats.services.extract import extract_category, extract_member

DALOGAX = Member("Dalogax", 305408)


def _doc():
    return {
        "member_since": "2019-03-01",
        "last_login": "2025-06-01T10:00:00Z",
        "last_update": "2025-06-02T00:00:00Z",
        "sports_car": {
            "iRating": {"value": 2200},
            "iRating_chart": {"data": [["2025-01-01", 2100], ["2025-02-01", 2200]]},
            "starts": 40,
        },
    }


def test_extract_category_projects_fields():
    record = extract_category(_doc(), DALOGAX, "sports_car")

    assert record.to_json() == {
        "name": "Dalogax",
        "id": 305408,
        "category": "sports_car",
        "currentRating": 2200,
        "chartData": [["2025-01-01", 2100], ["2025-02-01", 2200]],
        "stats": _doc()["sports_car"],
        "memberSince": "2019-03-01",
        "lastLogin": "2025-06-01T10:00:00Z",
        "lastUpdate": "2025-06-02T00:00:00Z",
    }


def test_missing_category_is_absent():
    assert extract_category(_doc(), DALOGAX, "formula_car") is None


def test_null_category_is_absent():
    doc = _doc()
    doc["formula_car"] = None
    assert extract_category(doc, DALOGAX, "formula_car") is None


def test_non_object_document_is_absent():
    assert extract_category(None, DALOGAX, "sports_car") is None
    assert extract_category([1, 2], DALOGAX, "sports_car") is None


def test_missing_nested_fields_use_defaults():
    doc = {"sports_car": {"iRating": None}}

    record = extract_category(doc, DALOGAX, "sports_car")

    assert record.current_rating == 0
    assert record.chart_data == []
    assert record.stats == {"iRating": None}
    assert record.member_since is None
    assert record.last_login is None
    assert record.last_update == ""


def test_non_object_subtree_degrades_to_defaults():
    record = extract_category({"sports_car": 7}, DALOGAX, "sports_car")

    assert record.current_rating == 0
    assert record.chart_data == []
    assert record.stats == 7


def test_extract_member_covers_every_category():
    result = extract_member(_doc(), DALOGAX, ["sports_car", "formula_car"])

    assert list(result) == ["sports_car", "formula_car"]
    assert result["sports_car"].current_rating == 2200
    assert result["formula_car"] is None
