"""Business logic for blog posts."""
import json
import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from database import BlogPost, utcnow
from ..errors import NotFound, store_errors
from ..repositories import BlogRepository, UserRepository
from ..validation import clean_text, require_fields, to_id, to_tags

logger = logging.getLogger('gamepulse.services.blogs')


class BlogService:
    """Creates and lists blog posts.

    New posts are published immediately with zeroed view and like counters.
    """

    def create(self, db: Session, user_id, title, content,
               category: Optional[str] = None, tags=None) -> BlogPost:
        """Publish a post for *user_id*.

        Raises:
            InvalidInput: user_id, title or content missing, or tags malformed.
            NotFound:     no user has *user_id*.
        """
        require_fields({'user_id': user_id, 'title': title, 'content': content},
                       'user_id', 'title', 'content')
        user_id = to_id(user_id, 'user_id')
        post = BlogPost(
            user_id=user_id,
            title=clean_text(title),
            category=clean_text(category),
            content=str(content).strip(),
            tags=json.dumps(to_tags(tags)),
            status='published',
            created_at=utcnow(),
            views=0,
            likes=0,
        )
        with store_errors(db, 'creating blog post', logger):
            if UserRepository(db).get(user_id) is None:
                raise NotFound('User not found')
            BlogRepository(db).add(post)
            db.commit()
        logger.info("User %s published blog post %s", user_id, post.id)
        return post

    def list_published(self, db: Session) -> List[Dict]:
        """Return published posts newest first, each with its author's name
        and role."""
        with store_errors(db, 'listing blog posts', logger):
            rows = BlogRepository(db).list_published_with_authors()
            result = []
            for post, author_name, author_role in rows:
                entry = post.to_dict()
                entry['author_name'] = author_name
                entry['author_role'] = author_role
                result.append(entry)
            return result

    def list_for_user(self, db: Session, user_id) -> List[BlogPost]:
        user_id = to_id(user_id, 'user_id')
        with store_errors(db, 'listing user blog posts', logger):
            return BlogRepository(db).list_for_user(user_id)
