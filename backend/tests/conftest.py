import pytest

from pantry_match.models.recipe import Recipe, RecipeIngredient, RecipeStatus, RecipeDifficulty
from pantry_match.services.catalog import InMemoryRecipeCatalog
from pantry_match.services.recommendation_engine import RecommendationEngine


def make_recipe(
    recipe_id,
    ingredients,
    wastage=None,
    tags=None,
    status=RecipeStatus.PUBLISHED,
    cooking_time=30,
    difficulty=RecipeDifficulty.EASY,
    likes=0,
    saves=0,
    views=0,
):
    wastage = wastage or [0] * len(ingredients)
    return Recipe(
        id=recipe_id,
        title=recipe_id.replace("-", " ").title(),
        status=status,
        cooking_time=cooking_time,
        difficulty=difficulty,
        ingredients=[
            RecipeIngredient(name=name, quantity=1, unit="pcs", wastage_reduction=w)
            for name, w in zip(ingredients, wastage)
        ],
        tags=tags or [],
        likes=likes,
        saves=saves,
        views=views,
    )


@pytest.fixture
def tomato_rice():
    return make_recipe("tomato-rice", ["tomato", "rice", "onion"], wastage=[2, 0, 1])


@pytest.fixture
def catalog(tomato_rice):
    catalog = InMemoryRecipeCatalog([
        tomato_rice,
        make_recipe(
            "pasta-pomodoro",
            ["pasta", "tomato", "garlic", "basil"],
            tags=["vegetarian", "italian"],
            cooking_time=20,
            likes=50, saves=10, views=400,
        ),
        make_recipe(
            "beef-stew",
            ["beef", "carrot", "potato", "onion", "stock"],
            cooking_time=120,
            difficulty=RecipeDifficulty.HARD,
            likes=50, saves=12, views=100,
        ),
        make_recipe(
            "draft-salad",
            ["tomato", "cucumber"],
            status=RecipeStatus.DRAFT,
            likes=999,
        ),
    ])
    catalog.add_substitution("rice", "quinoa", 0.9)
    catalog.add_substitution("onion", "scallion", 0.7)
    catalog.add_substitution("onion", "shallot", 0.8)
    return catalog


@pytest.fixture
def engine(catalog):
    return RecommendationEngine(catalog)
