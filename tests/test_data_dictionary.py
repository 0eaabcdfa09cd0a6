from src.data_dictionary import DATA_DICTIONARY, describe
from src.data_loader import REQUIRED_COLUMNS


def test_every_required_column_described():
    assert all(c in DATA_DICTIONARY for c in REQUIRED_COLUMNS)


def test_per_model_columns_fold_onto_base():
    text = describe("predicted_grad_rate_RandomForest")
    assert text.startswith(DATA_DICTIONARY["predicted_grad_rate"])
    assert text.endswith("(RandomForest)")
    assert "(linear)" in describe("risk_category_linear")


def test_unknown_column():
    assert describe("mascot") == ""
