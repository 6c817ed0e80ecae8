import logging

import pytest

from jsonapi_serializable import Error, ErrorSource, ShapeError, link, source, value
from jsonapi_serializable.core.context import BindingContext
from jsonapi_serializable.schemas import ErrorObject


class ServerError(Error):
    status = "500"
    title = "Internal Server Error"


class NotFound(Error):
    status = "404"
    code = "not_found"
    title = "Not Found"
    detail = value(compute=lambda ctx: f"No {ctx.kind} with id {ctx.key}")
    about = link(lambda ctx, link: f"/docs/errors/{ctx.kind}", name="about")

    @source
    def source(ctx, src):
        src.parameter("id")


def test_fixed_members():
    assert ServerError().render() == {"status": "500", "title": "Internal Server Error"}


def test_instance_value_wins_over_fixed_value():
    assert ServerError(status="404").render()["status"] == "404"
    assert ServerError().render()["status"] == "500"


def test_instance_value_wins_over_computation(counter):
    compute = counter(lambda ctx: "computed")

    class Computed(Error):
        detail = value(compute=compute)

    assert Computed(detail="given").render() == {"detail": "given"}
    assert compute.calls == 0


def test_fixed_value_wins_over_computation(counter):
    compute = counter(lambda ctx: "computed")

    class Both(Error):
        title = value("fixed", compute=compute)

    assert Both().render() == {"title": "fixed"}
    assert compute.calls == 0


def test_full_error_render():
    rendered = NotFound(kind="user", key="7").render()

    assert rendered == {
        "links": {"about": "/docs/errors/user"},
        "status": "404",
        "code": "not_found",
        "title": "Not Found",
        "detail": "No user with id 7",
        "source": {"parameter": "id"},
    }
    ErrorObject.model_validate(rendered)


def test_members_resolving_to_none_are_omitted():
    class Quiet(Error):
        title = value(compute=lambda ctx: None)

    assert Quiet().render() == {}


def test_members_are_memoized(counter):
    compute_detail = counter(lambda ctx: "once")
    compute_meta = counter(lambda ctx: None)
    where = counter(lambda ctx, src: src.pointer("/data"))

    class Counted(Error):
        status = "422"
        detail = value(compute=compute_detail)
        meta = value(compute=compute_meta)
        source = source(where)

    error = Counted()
    assert error.render() == error.render()
    assert (compute_detail.calls, compute_meta.calls, where.calls) == (1, 1, 1)


def test_links_are_resolved_lazily(counter):
    about = counter(lambda ctx, link: "/about")

    class Linked(Error):
        about_link = link(about, name="about")

    error = Linked()
    assert about.calls == 0
    assert error.links() == {"about": "/about"}
    error.render()
    assert about.calls == 1


def test_links_are_inherited_and_merged():
    class Base(Error):
        about = link(lambda ctx, link: "/about")
        help = link(lambda ctx, link: "/help")

    class Child(Base):
        help = link(lambda ctx, link: link.href("/child-help").meta({"v": 2}))
        type_link = link(lambda ctx, link: "/types/child", name="type")

    assert Child().links() == {
        "about": "/about",
        "help": {"href": "/child-help", "meta": {"v": 2}},
        "type": "/types/child",
    }
    assert Base().links() == {"about": "/about", "help": "/help"}


def test_scalar_members_are_inherited():
    class Specific(ServerError):
        code = "db_down"

    assert Specific().render() == {
        "status": "500",
        "code": "db_down",
        "title": "Internal Server Error",
    }


def test_source_accepts_open_ended_members():
    class Located(Error):
        @source
        def source(ctx, src):
            src.pointer("/data/attributes/title")
            src.header("X-Request-Id")
            src.set("line", ctx.line)

    assert Located(line=3).source() == {
        "pointer": "/data/attributes/title",
        "header": "X-Request-Id",
        "line": 3,
    }


def test_source_may_return_a_mapping():
    class Returned(Error):
        source = source(lambda ctx, src: {"pointer": "/data"})

    assert Returned().render() == {"source": {"pointer": "/data"}}


def test_source_setting_nothing_is_omitted():
    class Empty(Error):
        status = "400"
        source = source(lambda ctx, src: None)

    assert Empty().render() == {"status": "400"}


def test_source_with_wrong_shape_is_rejected():
    class Wrong(Error):
        source = source(lambda ctx, src: "pointer")

    with pytest.raises(ShapeError):
        Wrong().render()


def test_error_source_render_directly():
    ctx = BindingContext(field="title")
    rendered = ErrorSource.render(ctx, lambda ctx, src: src.pointer(f"/data/attributes/{ctx.field}"))
    assert rendered == {"pointer": "/data/attributes/title"}


def test_resolve_rejects_unknown_members():
    with pytest.raises(KeyError):
        ServerError().resolve("source")


def test_computation_errors_propagate():
    class Broken(Error):
        detail = value(compute=lambda ctx: ctx.missing)

    with pytest.raises(AttributeError):
        Broken().render()


def test_mutating_rendered_fixed_meta_does_not_leak():
    class Throttled(Error):
        status = "429"
        meta = {"retry": {"after": 30}}

    Throttled().render()["meta"]["retry"]["after"] = 0

    assert Throttled().render()["meta"] == {"retry": {"after": 30}}


def test_repr_does_not_run_computations(counter):
    tracked_status = counter(lambda ctx: "500")

    class Tracked(Error):
        status = value(compute=tracked_status)

    error = Tracked(user="dan", request="r1")
    assert repr(error) == "<Tracked bound=request, user>"
    assert tracked_status.calls == 0


def test_render_logs_error_type(caplog):
    with caplog.at_level(logging.DEBUG, logger="jsonapi_serializable"):
        ServerError().render()
    assert "ServerError" in caplog.text
