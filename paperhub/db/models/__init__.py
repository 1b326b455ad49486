# paperhub/db/models/__init__.py
from .comment import Comment
from .like import Like
