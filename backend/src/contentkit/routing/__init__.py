"""Routes from human-readable slugs to objects."""

from contentkit.routing.slugs import SlugResolver

__all__ = ["SlugResolver"]
