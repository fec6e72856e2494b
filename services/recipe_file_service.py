"""Recipe file service - serves plain-text recipe files from disk."""

import logging
import os

from app.config import settings
from app.exceptions import NotFoundError, PathTraversalError
from security.log_sanitizer import sanitize_for_log
from security.path_sanitizer import resolve

logger = logging.getLogger("mealplanner.recipe_files")


class RecipeFileService:
    """Read-only access to files under settings.recipe_files_dir"""

    @staticmethod
    def read_recipe_file(filename: str, base_dir: str = None) -> str:
        """
        Return the text of a recipe file.

        Raises:
            PathTraversalError: filename escapes the recipe directory
            NotFoundError: no such file
        """
        base_dir = base_dir or settings.recipe_files_dir
        try:
            path = resolve(base_dir, filename)
        except PathTraversalError:
            logger.warning(f"recipe_file_rejected filename={sanitize_for_log(filename)}")
            raise

        # A symlink inside the directory must not lead outside it
        real_base = os.path.realpath(base_dir)
        real_path = os.path.realpath(path)
        if os.path.commonpath([real_base, real_path]) != real_base:
            logger.warning(f"recipe_file_rejected filename={sanitize_for_log(filename)} reason=symlink")
            raise PathTraversalError("Resolved path escapes the base directory")

        if not os.path.isfile(real_path):
            raise NotFoundError(f"Recipe file '{filename}' not found")

        with open(real_path, encoding="utf-8") as fh:
            content = fh.read()
        logger.info(f"recipe_file_read filename={sanitize_for_log(filename)} bytes={len(content)}")
        return content

    @staticmethod
    def read_recipe_content(recipe_id: int, base_dir: str = None) -> str:
        """Text stored for a recipe as recipe_<id>.txt."""
        return RecipeFileService.read_recipe_file(f"recipe_{int(recipe_id)}.txt", base_dir)
