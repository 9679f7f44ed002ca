import pytest

from hyclock.core.clock import Clock
from hyclock.infra.msgpack_serializer import Serializer
from hyclockctl.cli import entrypoint


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ("HYCLOCK_CONFIG", "HYCLOCK_NODE_ID", "HYCLOCK_MAX_DRIFT_MS",
                 "HYCLOCK_COUNTER_WARNING", "HYCLOCK_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def run(capsys, *argv: str) -> str:
    entrypoint(list(argv))
    return capsys.readouterr().out.strip()


@pytest.mark.ut
def test_create(capsys):
    assert run(capsys, "create", "Fqwkze", "685421586") == "000000685421586:00000000:Fqwkze"


@pytest.mark.ut
def test_create_uses_configured_node_id(capsys, monkeypatch):
    monkeypatch.setenv("HYCLOCK_NODE_ID", "node-env")
    assert run(capsys, "create", "-", "1") == "000000000000001:00000000:node-env"


@pytest.mark.ut
def test_create_defaults_to_system_time(capsys):
    out = run(capsys, "create", "a")
    assert len(out) == 26
    assert out.endswith(":00000000:a")


@pytest.mark.ut
def test_local(capsys):
    out = run(capsys, "local", "bIfQod", "000000685421586:00000000:Fqwkze", "655417542")
    assert out == "000000685421586:00000001:bIfQod"


@pytest.mark.ut
def test_remote(capsys):
    out = run(
        capsys,
        "remote",
        "Z3HGBA",
        "000000685421586:00000000:Fqwkze",
        "000001681498960:00000000:WuVls0",
        "655417542",
    )
    assert out == "000001681498960:00000001:Z3HGBA"


@pytest.mark.ut
@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("000000000000001:00000000:a", "000000000000002:00000000:a", "LT"),
        ("000000000000002:00000000:a", "000000000000001:00000009:a", "GT"),
        ("000000000000002:00000001:b", "000000000000002:00000001:b", "EQ"),
        ("000000000000002:00000001:a", "000000000000002:00000001:b", "LT"),
    ],
)
def test_compare(capsys, a, b, expected):
    assert run(capsys, "compare", a, b) == expected


@pytest.mark.ut
def test_decode(capsys):
    out = run(capsys, "decode", "000000712414542:00000000:w8RIc5")
    assert out == "physical=712414542 counter=0 id=w8RIc5"


@pytest.mark.ut
def test_sort(capsys):
    out = run(
        capsys,
        "sort",
        "000000000000002:00000000:a",
        "000000000000001:00000003:b",
        "000000000000001:00000003:a",
    )
    assert out.splitlines() == [
        "000000000000001:00000003:a",
        "000000000000001:00000003:b",
        "000000000000002:00000000:a",
    ]


@pytest.mark.ut
def test_frame(capsys):
    out = run(capsys, "frame", "000000000000042:00000001:a")
    assert Serializer.clock(bytes.fromhex(out)) == Clock(physical=42, counter=1, id="a")


@pytest.mark.ut
@pytest.mark.parametrize(
    "argv",
    [
        ("decode", "bad:format"),
        ("decode",),
        ("create", "a:b", "1"),
        ("create", "a", "soon"),
        ("local", "a", "000000000000001:99999999:a", "0"),
    ],
)
def test_errors_exit_with_status_1(capsys, argv):
    with pytest.raises(SystemExit) as exc:
        entrypoint(list(argv))

    assert exc.value.code == 1
    assert capsys.readouterr().err.startswith("Error: ")


@pytest.mark.ut
def test_invalid_environment_configuration_exits_with_status_1(capsys, monkeypatch):
    monkeypatch.setenv("HYCLOCK_NODE_ID", "a:b")
    with pytest.raises(SystemExit) as exc:
        entrypoint(["create", "-", "1"])

    assert exc.value.code == 1
    assert capsys.readouterr().err.startswith("Error: invalid configuration")


@pytest.mark.ut
def test_invalid_yaml_configuration_exits_with_status_1(capsys, tmp_path):
    file = tmp_path / "clock.yaml"
    file.write_text("max_drift_ms: -5\n")
    with pytest.raises(SystemExit) as exc:
        entrypoint(["-c", str(file), "create", "a", "1"])

    assert exc.value.code == 1
    assert capsys.readouterr().err.startswith("Error: invalid configuration")
