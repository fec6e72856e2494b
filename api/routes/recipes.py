"""
Recipe routes - CRUD, import and HTML card endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from api.dependencies import get_db
from domain.schemas.recipe_schemas import RecipeCreate, RecipeDocument, RecipeUpdate, RecipeResponse
from services.recipe_service import RecipeService

router = APIRouter(prefix="/recipes", tags=["Recipes"])


def _location(request: Request, recipe_id: int) -> str:
    return str(request.url_for("get_recipe", recipe_id=recipe_id).path)


@router.get("", response_model=List[RecipeResponse])
def list_recipes(
    name: Optional[str] = Query(default=None, max_length=120, description="Exact recipe name"),
    db: Session = Depends(get_db),
):
    """List every recipe, or only those named exactly `name`."""
    recipes = RecipeService.list_recipes(db, name=name)
    return [RecipeResponse.model_validate(r) for r in recipes]


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
def create_recipe(
    data: RecipeCreate, request: Request, response: Response, db: Session = Depends(get_db)
):
    """Create a recipe with links to existing ingredients."""
    recipe = RecipeService.create_recipe(db, data)
    response.headers["Location"] = _location(request, recipe.id)
    return RecipeResponse.model_validate(recipe)


@router.post(
    "/import",
    response_model=RecipeResponse,
    status_code=status.HTTP_201_CREATED,
    openapi_extra={
        "requestBody": {
            "content": {
                "application/json": {"schema": RecipeDocument.model_json_schema()},
                "application/xml": {"schema": {"type": "string"}},
            },
            "required": True,
        }
    },
)
async def import_recipe(request: Request, response: Response, db: Session = Depends(get_db)):
    """
    Import a recipe document.

    Accepts `application/json` or `application/xml`; the document must match
    the recipe shape and may not declare types or entities of its own.
    """
    payload = await request.body()
    content_type = request.headers.get("content-type")

    def _import():
        recipe = RecipeService.import_recipe(db, payload, content_type)
        return RecipeResponse.model_validate(recipe)

    created = await run_in_threadpool(_import)
    response.headers["Location"] = _location(request, created.id)
    return created


@router.get("/{recipe_id}", response_model=RecipeResponse)
def get_recipe(recipe_id: int, db: Session = Depends(get_db)):
    """Get a single recipe with its ingredient links."""
    return RecipeResponse.model_validate(RecipeService.get_recipe(db, recipe_id))


@router.put("/{recipe_id}", response_model=RecipeResponse)
def update_recipe(recipe_id: int, data: RecipeUpdate, db: Session = Depends(get_db)):
    """Replace name, description and ingredient links of a recipe."""
    return RecipeResponse.model_validate(RecipeService.update_recipe(db, recipe_id, data))


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipe(recipe_id: int, db: Session = Depends(get_db)):
    """Delete a recipe together with its ingredient and meal-plan links."""
    RecipeService.delete_recipe(db, recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{recipe_id}/card", response_class=HTMLResponse)
def recipe_card(recipe_id: int, db: Session = Depends(get_db)):
    """HTML card for a recipe."""
    return HTMLResponse(content=RecipeService.render_card(db, recipe_id))
