import pytest
import requests

from pantry_match.exceptions import CatalogUnavailableError
from pantry_match.models.recipe import RecipeDifficulty
from pantry_match.services.catalog import CatalogQuery
from pantry_match.services.catalog_api_service import HttpRecipeCatalog

RECIPE_ROW = {
    "id": "r-1",
    "title": "Tomato Rice",
    "status": "PUBLISHED",
    "cooking_time": 25,
    "difficulty": "EASY",
    "ingredients": [{"name": "tomato", "wastage_reduction": 2}],
    "tags": ["vegan"],
    "likes": 3,
}


def make_response(mocker, payload=None, status_code=200):
    response = mocker.Mock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def client():
    return HttpRecipeCatalog(
        base_url="http://catalog.test/api/",
        api_key="secret",
        timeout=5,
        max_retries=2,
        retry_delay=0,
    )


@pytest.fixture
def mock_get(mocker):
    return mocker.patch("pantry_match.services.catalog_api_service.requests.get")


def test_find_published_recipes_sends_filters(client, mock_get, mocker):
    mock_get.return_value = make_response(mocker, {"data": [RECIPE_ROW]})

    recipes = client.find_published_recipes(
        CatalogQuery(
            max_cooking_time=30,
            difficulty=RecipeDifficulty.EASY,
            must_include_any_ingredient=["Tomato", "onion"],
        )
    )

    assert [r.id for r in recipes] == ["r-1"]
    args, kwargs = mock_get.call_args
    assert args[0] == "http://catalog.test/api/recipes"
    assert kwargs["params"] == {
        "status": "PUBLISHED",
        "max_cooking_time": 30,
        "difficulty": "EASY",
        "ingredients": "tomato,onion",
    }
    assert kwargs["headers"]["x-api-key"] == "secret"
    assert kwargs["timeout"] == 5


def test_find_published_recipes_drops_unpublished_rows(client, mock_get, mocker):
    mock_get.return_value = make_response(
        mocker, [RECIPE_ROW, {**RECIPE_ROW, "id": "r-2", "status": "DRAFT"}]
    )

    assert [r.id for r in client.find_published_recipes()] == ["r-1"]


def test_find_substitutions(client, mock_get, mocker):
    mock_get.return_value = make_response(
        mocker,
        {"data": [{"substitute": "quinoa", "confidence": 0.9, "notes": None}]},
    )

    edges = client.find_substitutions(" Rice ")

    assert [(e.substitute, e.confidence) for e in edges] == [("quinoa", 0.9)]
    assert mock_get.call_args.kwargs["params"] == {"ingredient": "rice"}


def test_retries_transient_errors_then_succeeds(client, mock_get, mocker):
    mock_get.side_effect = [
        requests.exceptions.Timeout(),
        requests.exceptions.ConnectionError(),
        make_response(mocker, []),
    ]

    assert client.find_substitutions("rice") == []
    assert mock_get.call_count == 3


def test_raises_after_retries_exhausted(client, mock_get):
    mock_get.side_effect = requests.exceptions.ConnectionError()

    with pytest.raises(CatalogUnavailableError):
        client.find_published_recipes()
    assert mock_get.call_count == 3


def test_server_errors_are_retried(client, mock_get, mocker):
    mock_get.side_effect = [
        make_response(mocker, status_code=503),
        make_response(mocker, [RECIPE_ROW]),
    ]

    assert len(client.find_published_recipes()) == 1


def test_client_errors_are_not_retried(client, mock_get, mocker):
    mock_get.return_value = make_response(mocker, status_code=401)

    with pytest.raises(CatalogUnavailableError):
        client.find_published_recipes()
    assert mock_get.call_count == 1


def test_invalid_json_raises(client, mock_get, mocker):
    response = make_response(mocker)
    response.json.side_effect = ValueError("no json")
    mock_get.return_value = response

    with pytest.raises(CatalogUnavailableError):
        client.find_substitutions("rice")


def test_undecodable_body_is_not_retried(client, mock_get, mocker):
    response = make_response(mocker)
    response.json.side_effect = requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0)
    mock_get.return_value = response

    with pytest.raises(CatalogUnavailableError):
        client.find_published_recipes()
    assert mock_get.call_count == 1


@pytest.mark.parametrize(
    "payload",
    [
        {"unexpected": True},
        [{"id": "r-1"}],
        "not a list",
    ],
)
def test_malformed_recipe_payload_raises(client, mock_get, mocker, payload):
    mock_get.return_value = make_response(mocker, payload)

    with pytest.raises(CatalogUnavailableError):
        client.find_published_recipes()


def test_requires_base_url(mocker):
    mocker.patch("pantry_match.services.catalog_api_service.settings.CATALOG_BASE_URL", None)

    with pytest.raises(ValueError):
        HttpRecipeCatalog(base_url=None)
