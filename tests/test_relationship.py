import dataclasses
from types import SimpleNamespace

import pytest

from jsonapi_serializable import BindingContext, Relationship, Resource, ShapeError, attribute, relationship, value


class UserResource(Resource):
    class Meta:
        type_ = "users"

    id = value(compute=lambda ctx: str(ctx.user.id))
    name = attribute(lambda ctx: ctx.user.name)


def _bind(declaration, name="author", **context):
    declaration = dataclasses.replace(declaration, name=name)
    return Relationship(declaration, BindingContext(context))


def test_not_included_emits_no_data(dan, counter):
    data = counter(lambda ctx: UserResource(user=ctx.user))
    rel = _bind(relationship(data), user=dan)

    assert rel.render(included=False) == {}
    assert data.calls == 0


def test_single_resource_linkage_is_derived(dan):
    rel = _bind(relationship(lambda ctx: UserResource(user=ctx.user)), user=dan)
    assert rel.render(included=True) == {"data": {"type": "users", "id": "7"}}


def test_many_resources_linkage_is_derived(dan):
    ada = SimpleNamespace(id=8, name="Ada")
    rel = _bind(
        relationship(lambda ctx: [UserResource(user=u) for u in ctx.users]),
        users=[dan, ada],
    )
    assert rel.render(included=True) == {
        "data": [{"type": "users", "id": "7"}, {"type": "users", "id": "8"}]
    }


def test_null_relationship():
    rel = _bind(relationship(lambda ctx: None))
    assert rel.render(included=True) == {"data": None}
    assert rel.related() == []


def test_empty_to_many_relationship():
    rel = _bind(relationship(lambda ctx: []))
    assert rel.render(included=True) == {"data": []}
    assert rel.related() == []


def test_explicit_linkage_does_not_resolve_data(counter):
    data = counter(lambda ctx: pytest.fail("data must not be resolved"))
    linkage = counter(lambda ctx: {"type": "users", "id": str(ctx.author_id)})
    rel = _bind(relationship(data, linkage_data=linkage), author_id=9)

    assert rel.render(included=True) == {"data": {"type": "users", "id": "9"}}
    assert rel.render(included=True) == {"data": {"type": "users", "id": "9"}}
    assert data.calls == 0
    assert linkage.calls == 1


def test_linkage_only_relationship_has_no_related_resources():
    rel = _bind(relationship(linkage_data=lambda ctx: [{"type": "tags", "id": "1"}]))
    assert rel.render(included=True) == {"data": [{"type": "tags", "id": "1"}]}
    assert rel.related() == []


def test_relationship_without_data_or_linkage_never_emits_data():
    rel = _bind(relationship(links={"related": lambda ctx, link: "/users/7/author"}))
    assert rel.render(included=True) == {"links": {"related": "/users/7/author"}}


def test_data_is_resolved_once(dan, counter):
    data = counter(lambda ctx: UserResource(user=ctx.user))
    rel = _bind(relationship(data), user=dan)

    first = rel.data()
    rel.render(included=True)
    rel.related()
    assert rel.data() is first
    assert data.calls == 1


def test_null_data_is_resolved_once(counter):
    data = counter(lambda ctx: None)
    rel = _bind(relationship(data))
    rel.render(included=True)
    rel.render(included=True)
    assert data.calls == 1


def test_generator_data_is_materialized(dan):
    rel = _bind(
        relationship(lambda ctx: (UserResource(user=u) for u in [ctx.user])),
        user=dan,
    )
    assert rel.render(included=True) == {"data": [{"type": "users", "id": "7"}]}
    assert [r.id_of() for r in rel.related()] == ["7"]


def test_links_are_rendered_at_construction(counter):
    compute = counter(lambda ctx, link: link.href(f"/posts/{ctx.post_id}/author").meta({"a": 1}))
    rel = _bind(relationship(links={"related": compute}), post_id=1)

    assert compute.calls == 1
    assert rel.render(included=False) == {
        "links": {"related": {"href": "/posts/1/author", "meta": {"a": 1}}}
    }
    assert compute.calls == 1


def test_meta_fixed_and_computed(counter):
    fixed = _bind(relationship(meta={"paginated": True}))
    assert fixed.render(included=False) == {"meta": {"paginated": True}}

    compute = counter(lambda ctx: {"count": ctx.count})
    computed = _bind(relationship(meta=compute), count=3)
    assert compute.calls == 0
    assert computed.render(included=False) == {"meta": {"count": 3}}
    assert computed.render(included=False) == {"meta": {"count": 3}}
    assert compute.calls == 1


def test_unexpected_data_shape_is_rejected():
    rel = _bind(relationship(lambda ctx: {"type": "users", "id": "1"}))
    with pytest.raises(ShapeError):
        rel.render(included=True)
    with pytest.raises(ShapeError):
        rel.related()


def test_list_with_non_resource_is_rejected(dan):
    rel = _bind(relationship(lambda ctx: [UserResource(user=ctx.user), "oops"]), user=dan)
    with pytest.raises(ShapeError):
        rel.render(included=True)


@pytest.mark.parametrize(
    "linkage",
    [
        {"type": "users"},
        {"type": "users", "id": 7},
        [{"type": "users", "id": "7", "extra": 1}],
        "users:7",
    ],
)
def test_invalid_explicit_linkage_is_rejected(linkage):
    rel = _bind(relationship(linkage_data=lambda ctx: linkage))
    with pytest.raises(ShapeError):
        rel.render(included=True)


def test_linkage_validation_can_be_disabled():
    declaration = relationship(linkage_data=lambda ctx: {"type": "users", "id": 7}, name="author")
    rel = Relationship(declaration, {}, validate_linkage=False)
    assert rel.render(included=True) == {"data": {"type": "users", "id": 7}}


def test_data_errors_propagate_unchanged():
    def explode(ctx):
        raise LookupError("db down")

    rel = _bind(relationship(explode))
    with pytest.raises(LookupError, match="db down"):
        rel.render(included=True)


def test_mutating_rendered_fixed_meta_does_not_leak():
    declaration = relationship(lambda ctx: None, meta={"count": 0})
    rendered = _bind(declaration).render(included=False)
    rendered["meta"]["count"] = 5

    assert _bind(declaration).render(included=False) == {"meta": {"count": 0}}
