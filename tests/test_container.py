import pytest

from namebind import Container, ContainerError, NotFoundError, type_name


class Service: ...


class Factories:
    def create(self):
        return Service()


def test_get_unregistered_string_token_raises_not_found():
    c = Container()
    with pytest.raises(NotFoundError):
        c.get("SomeFakeClassName")


def test_not_found_is_a_lookup_error():
    c = Container()
    with pytest.raises(LookupError):
        c.get("unknown-token")


def test_register_passes_container_to_callback():
    c = Container()
    seen = []

    def make(container):
        seen.append(container)
        return Service()

    c.register("svc", make)
    assert isinstance(c.get("svc"), Service)
    assert seen[0] is c


def test_register_accepts_callback_without_container_argument():
    c = Container()

    c.register("svc", lambda: Service())
    assert isinstance(c.get("svc"), Service)


def test_register_accepts_bound_method():
    c = Container()

    c.register("test2", Factories().create)
    assert c.has("test2")
    assert isinstance(c.get("test2"), Service)


def test_register_class_builds_it_reflectively():
    c = Container()

    class DB: ...

    class Repo:
        def __init__(self, db: DB):
            self.db = db

    c.register("repo", Repo)
    repo = c.get("repo")
    assert isinstance(repo, Repo)
    assert isinstance(repo.db, DB)


def test_register_returns_normalized_callback():
    c = Container()

    callback = c.register("svc", lambda: Service())
    assert isinstance(callback(c), Service)


def test_register_non_callable_raises():
    c = Container()
    with pytest.raises(ContainerError):
        c.register("svc", 42)


@pytest.mark.parametrize("value", [None, False, 0, 1.5, "text", b"bytes"])
def test_instance_rejects_scalars(value):
    c = Container()
    with pytest.raises(ContainerError):
        c.instance("value", value)
    assert not c.has("value")


def test_instance_returns_registered_object():
    c = Container()
    svc = Service()
    assert c.instance("svc", svc) is svc
    assert c.get("svc") is svc


def test_has_checks_every_table():
    c = Container()

    c.register("callback", lambda: Service())
    c.instance("object", Service())
    c.alias("alias", "nowhere")
    c.set_argument("argument", 8080)

    for name in ("callback", "object", "alias", "argument"):
        assert c.has(name), name
    assert not c.has("missing")


def test_has_is_case_sensitive():
    c = Container()
    c.instance("test", Service())
    assert not c.has("TEST")


def test_unregister_removes_name_from_every_table():
    c = Container()

    c.register("name", lambda: Service())
    c.instance("name", Service())
    c.alias("name", "other")
    c.set_argument("name", "Eric")

    c.unregister("name")

    assert not c.has("name")
    with pytest.raises(NotFoundError):
        c.get("name")


def test_unregister_argument_then_register_instance():
    c = Container()

    c.set_argument("name", "Eric")
    assert c.has("name")
    c.unregister("name")
    assert not c.has("name")

    c.instance("name", Service())
    assert isinstance(c.get("name"), Service)

    c.unregister("name")
    with pytest.raises(NotFoundError):
        c.get("name")


def test_unregister_unknown_name_is_a_no_op():
    c = Container()
    c.unregister("never-registered")
    assert not c.has("never-registered")


def test_is_factory():
    c = Container()

    c.factory("fresh", lambda: Service())
    c.register("cached", lambda: Service())

    assert c.is_factory("fresh")
    assert not c.is_factory("cached")
    assert not c.is_factory("notAFactory")

    c.unregister("fresh")
    assert not c.is_factory("fresh")


def test_class_identifier_is_its_dotted_name():
    c = Container()

    class Repo: ...

    repo = Repo()
    c.instance(Repo, repo)

    assert type_name(Repo) == f"{Repo.__module__}.{Repo.__qualname__}"
    assert c.has(type_name(Repo))
    assert c.get(type_name(Repo)) is repo
    assert c.get(Repo) is repo


def test_non_string_identifier_raises():
    c = Container()
    with pytest.raises(ContainerError):
        c.get(42)


@pytest.mark.parametrize("limit", [-1, "50", 2.5, True])
def test_invalid_alias_resolve_limit_raises(limit):
    with pytest.raises(ValueError):
        Container(alias_resolve_limit=limit)


def test_configuration_is_exposed():
    c = Container(alias_resolve_limit=3, case_insensitive=False)
    assert c.alias_resolve_limit == 3
    assert c.case_insensitive is False


def test_read_only_calls_do_not_remember_classes():
    c = Container()

    class Local: ...

    assert not c.has(Local)
    assert not c.is_factory(Local)
    assert c.resolve_alias(Local) == type_name(Local)

    with pytest.raises(NotFoundError):
        c.get(type_name(Local))

    assert isinstance(c.get(Local), Local)
    assert isinstance(c.get(type_name(Local)), Local)


def test_unregister_forgets_class():
    c = Container()

    class Local: ...

    c.instance(Local, Local())
    c.unregister(Local)

    assert not c.has(Local)
    with pytest.raises(NotFoundError):
        c.get(type_name(Local))
