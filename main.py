from contextlib import asynccontextmanager

from fastapi import FastAPI

from snsfeed.core import config
from snsfeed.core.logx import logger
from snsfeed.core.post_commit import shutdown_dispatcher
from snsfeed.routers import members, follows, posts, comments, likes


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.is_debug(config.DEBUG)
    yield
    # let already committed side effects finish
    shutdown_dispatcher(wait=True)


app = FastAPI(title="SNS Feed", lifespan=lifespan)

# routers
app.include_router(members.members_router)
app.include_router(follows.follows_router)
# comments first: /posts/{post_id}/comments must win over /posts/{board_type}/{post_id}
app.include_router(comments.comments_router)
app.include_router(posts.posts_router)
app.include_router(likes.likes_router)

# uvicorn main:app
# uvicorn main:app --reload
@app.get("/")
def root():
    return {"message": "Welcome to SNS Feed"}
