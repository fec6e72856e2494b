"""Recipe file routes - plain-text files from the recipe directory"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from services.recipe_file_service import RecipeFileService

router = APIRouter(prefix="/recipe-files", tags=["Recipe Files"])


@router.get("/{filename}", response_class=PlainTextResponse)
def get_recipe_file(filename: str):
    """
    Return a recipe file by bare name.

    Names containing `..`, `/` or `\\` are rejected with 400.
    """
    return PlainTextResponse(RecipeFileService.read_recipe_file(filename))
