"""Repository for blog posts."""
from typing import List, Tuple

from database import BlogPost, User
from .base import BaseRepository


class BlogRepository(BaseRepository):
    """Queries the ``blog_posts`` table."""

    model = BlogPost

    def list_published_with_authors(self) -> List[Tuple[BlogPost, str, str]]:
        """Return ``(post, author_name, author_role)`` rows, newest first."""
        return (self._db.query(BlogPost, User.name, User.role)
                .join(User, BlogPost.user_id == User.id)
                .filter(BlogPost.status == 'published')
                .order_by(BlogPost.created_at.desc(), BlogPost.id.desc())
                .all())

    def list_for_user(self, user_id: int) -> List[BlogPost]:
        return (self._db.query(BlogPost)
                .filter(BlogPost.user_id == user_id)
                .order_by(BlogPost.created_at.desc(), BlogPost.id.desc())
                .all())

    def count_for_user(self, user_id: int) -> int:
        return self._db.query(BlogPost).filter(BlogPost.user_id == user_id).count()
