import pytest

import oasis_cli
import oasis_layer
import prime_oases
import prime_oasis
from oasis_search import __version__


@pytest.fixture(autouse=True)
def no_trace(monkeypatch):
    monkeypatch.delenv("XPT_FLG", raising=False)


def output(capsys):
    return capsys.readouterr().out.splitlines()


def hits(lines, prefix):
    return [line for line in lines if line.startswith(prefix)]


# ─────────────────────────────────────────────────────────────────────────────
# prime_oasis
# ─────────────────────────────────────────────────────────────────────────────
def test_prime_oasis_default_end(capsys):
    assert prime_oasis.main(["3", "2"]) == 0
    lines = output(capsys)
    assert lines[0] == "Prime Oasis - Press 'q', ESC, or Ctrl+C to interrupt"
    assert set(lines[1]) == {"="}
    assert lines[2] == ""
    assert lines[3:] == [
        "oasis prime  = 7",
        "oasis prime  = 11",
        "(try=3, hit=2, twin=0)",
    ]


def test_prime_oasis_explicit_end(capsys):
    assert prime_oasis.main(["3", "3", "3"]) == 0
    assert output(capsys)[-1] == "(try=0, hit=0, twin=0)"


def test_prime_oasis_max_hits(capsys):
    assert prime_oasis.main(["3", "2", "--max-hits", "1"]) == 0
    assert output(capsys)[-2:] == ["oasis prime  = 7", "(try=1, hit=1, twin=0)"]


def test_prime_oasis_bad_max_hits(capsys):
    with pytest.raises(SystemExit) as excinfo:
        prime_oasis.main(["3", "2", "--max-hits", "0"])
    assert excinfo.value.code == 2


@pytest.mark.parametrize("argv, code", [
    ([], -1),
    (["3"], -1),
    (["3", "4", "5", "6"], -1),
    (["1", "2"], -2),
    (["3", "1"], -2),
    (["3", "2", "2"], -3),
    (["5", "4", "2"], -3),
    (["abc", "2"], -4),
    (["3", "x", "2"], -4),
])
def test_prime_oasis_config_errors(capsys, argv, code):
    assert prime_oasis.main(argv) == code
    lines = output(capsys)
    assert any(line.startswith("ERROR: ") for line in lines)
    assert "---< USAGE:" in lines
    assert not hits(lines, "oasis prime")


def test_version_line_with_trace(capsys, monkeypatch):
    monkeypatch.setenv("XPT_FLG", "0x0001")
    prime_oasis.main(["3", "2"])
    assert output(capsys)[0] == f"version: v{__version__}"


# ─────────────────────────────────────────────────────────────────────────────
# prime_oases
# ─────────────────────────────────────────────────────────────────────────────
def test_prime_oases_single_desert(capsys):
    assert prime_oases.main(["d6"]) == 0
    lines = output(capsys)
    assert lines[0] == "Prime Oases - Press 'q', ESC, or Ctrl+C to interrupt"
    assert lines[3:] == [
        "d6*1-1 = 59",
        "d6*1+1 = 61",
        "{ prime_oases d6 x1 1: try=2, hit=2(100.0%) }",
    ]


def test_prime_oases_offset_and_count(capsys):
    assert prime_oases.main(["d3", "x2", "2"]) == 0
    assert output(capsys)[3:] == [
        "d3*2-1 = 11",
        "d3*2+1 = 13",
        "d3*3-1 = 17",
        "d3*3+1 = 19",
        "{ prime_oases d3 x2 2: try=4, hit=4(100.0%) }",
    ]


def test_prime_oases_count_only(capsys):
    assert prime_oases.main(["d2", "3"]) == 0
    assert output(capsys)[-1] == "{ prime_oases d2 x1 3: try=4, hit=3(75.0%) }"


def test_prime_oases_offset_only(capsys):
    assert prime_oases.main(["d3", "x4"]) == 0
    # 23 and 25
    assert output(capsys)[3:] == [
        "d3*4-1 = 23",
        "{ prime_oases d3 x4 1: try=2, hit=1(50.0%) }",
    ]


@pytest.mark.parametrize("argv, code", [
    ([], -1),
    (["d3", "x1", "2", "3"], -1),
    (["d3", "x0"], -2),
    (["d3", "0"], -2),
    (["6"], -3),
    (["d"], -3),
    (["d6a"], -3),
    (["d1"], -4),
    (["d0"], -4),
    (["d3", "y2", "3"], -5),
    (["d3", "xx"], -5),
    (["d3", "abc"], -6),
    (["d3", "x2", "x3"], -6),
])
def test_prime_oases_config_errors(capsys, argv, code):
    assert prime_oases.main(argv) == code
    lines = output(capsys)
    assert any(line.startswith("ERROR: ") for line in lines)
    assert "---< USAGE:" in lines


# ─────────────────────────────────────────────────────────────────────────────
# oasis_layer
# ─────────────────────────────────────────────────────────────────────────────
@pytest.mark.parametrize("argv, code", [([], -1), (["4"], -2), (["one"], -2), (["1", "2"], -1)])
def test_oasis_layer_config_errors(capsys, argv, code):
    assert oasis_layer.main(argv) == code
    assert "---< USAGE:" in output(capsys)


def test_layer_presets():
    mode, cap = oasis_layer.layer_params(["3"])
    assert cap == 32000
    assert mode.end == 2 * mode.start
    assert mode.start % mode.step == 0


def test_layer_1_regression(capsys):
    # recorded output of the 1024-bit layer 1 run
    assert oasis_layer.main(["1"]) == 0
    lines = output(capsys)
    found = hits(lines, "oasis prime")
    assert len(found) == 20
    # no banner: the first line is already a hit
    assert lines[0] == found[0]
    assert found[0] == (
        "oasis prime  = 2825316306925682433915768672179340796128917213519487069241249529"
        "171862110997815815759607546544691213214701362889014226079377908856929026235806002"
        "962070710365662543644390862362492580972116364262478035480289616321859707554022310"
        "668332270492441122793125806189337411281492496035721393388592871507609346222719999"
    )
    assert found[9].startswith("oasis prime  = 3585978389559520012277706391612240241240548771")
    assert found[19].startswith("oasis prime  = 5215968566632029108767572933254167623622616394")
    assert lines[-1] == "(try=1402, hit=20, twin=0)"


def test_trace_config_reaches_search(capsys, monkeypatch):
    seen = []

    class Recording(oasis_cli.OasisSearch):
        def __init__(self, mode, **kwargs):
            seen.append(kwargs["trace"])
            super().__init__(mode, **kwargs)

    monkeypatch.setattr(oasis_cli, "OasisSearch", Recording)
    monkeypatch.setenv("XPT_FLG", "0x0004")
    assert prime_oases.main(["d6"]) == 0
    assert [t.flags for t in seen] == [0x0004]
