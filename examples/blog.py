"""Example: serialize a small blog with users, articles and comments.

Run with:
    python examples/blog.py
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field

from jsonapi_serializable import (
    DocumentBuilder,
    Error,
    Resource,
    attribute,
    link,
    relationship,
    source,
    value,
)
from jsonapi_serializable.utils import parse_query_params

BASE_URL = "https://api.example.com"


@dataclass
class User:
    id: int
    name: str
    email: str


@dataclass
class Comment:
    id: int
    body: str
    author: User


@dataclass
class Article:
    id: int
    title: str
    body: str
    author: User
    comments: list[Comment] = field(default_factory=list)


class UserResource(Resource):
    class Meta:
        type_ = "users"

    id = value(compute=lambda ctx: str(ctx.user.id))
    name = attribute(lambda ctx: ctx.user.name)
    email = attribute(lambda ctx: ctx.user.email)
    self_link = link(lambda ctx, link: f"{BASE_URL}/users/{ctx.user.id}", name="self")


class CommentResource(Resource):
    class Meta:
        type_ = "comments"

    id = value(compute=lambda ctx: str(ctx.comment.id))
    body = attribute(lambda ctx: ctx.comment.body)
    author = relationship(
        lambda ctx: UserResource(user=ctx.comment.author),
        linkage_data=lambda ctx: {"type": "users", "id": str(ctx.comment.author.id)},
    )


class ArticleResource(Resource):
    class Meta:
        type_ = "articles"

    id = value(compute=lambda ctx: str(ctx.article.id))
    title = attribute(lambda ctx: ctx.article.title)
    body = attribute(lambda ctx: ctx.article.body)

    @attribute(name="word-count")
    def word_count(ctx):
        return len(ctx.article.body.split())

    author = relationship(
        lambda ctx: UserResource(user=ctx.article.author),
        links={"related": lambda ctx, link: f"{BASE_URL}/articles/{ctx.article.id}/author"},
    )
    comments = relationship(
        lambda ctx: [CommentResource(comment=c) for c in ctx.article.comments],
        meta=lambda ctx: {"count": len(ctx.article.comments)},
    )

    @link(name="self")
    def self_link(ctx, link):
        link.href(f"{BASE_URL}/articles/{ctx.article.id}")
        link.meta({"canonical": True})


class ArticleNotFound(Error):
    status = "404"
    title = "Not Found"
    detail = value(compute=lambda ctx: f"No article with id {ctx.article_id}")

    @source
    def source(ctx, src):
        src.parameter("id")


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)
    dan = User(1, "Dan Gebhardt", "dan@example.com")
    ada = User(2, "Ada", "ada@example.com")
    article = Article(
        1,
        "JSON:API paints my bikeshed!",
        "The shortest article. Ever.",
        author=dan,
        comments=[Comment(5, "First!", ada), Comment(12, "I like XML better", dan)],
    )

    params = parse_query_params(
        {"include": "author,comments.author", "fields[users]": "name"}
    )
    builder = DocumentBuilder(validate=True)
    document = builder.build(
        ArticleResource(article=article),
        fields=params["fields"],
        include=params["include"],
        jsonapi={"version": "1.1"},
    )
    print(json.dumps(document, indent=2))
    print(json.dumps(builder.build_errors([ArticleNotFound(article_id="42")]), indent=2))


if __name__ == "__main__":
    main()
