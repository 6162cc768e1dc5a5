from time import sleep

from tablegen import config
from tablegen.errors import GenerationError, InvalidArgument, MissingPrimaryKey, UnsupportedColumnType
from tablegen.row_sources import available_row_sources, resolve_row_source
from tablegen.utils import profiler


def test_get_settings_defaults():
    settings = config.get_settings()
    assert settings.db_host == "localhost"
    assert settings.db_port == 5432
    assert settings.insert_chunk_size == 1_000_000
    assert settings.temporal_span_seconds == 100_000_000
    assert settings.row_source in available_row_sources()


def test_profile_block_measures_time():
    with profiler.profile_block("sleep") as stats:
        sleep(0.05)
        stats.rows = 10
    assert stats.duration_seconds >= 0.05
    assert 0 < stats.rows_per_second <= 200
    summary = stats.as_dict()
    assert summary["label"] == "sleep"
    assert summary["rows"] == 10


def test_available_row_sources():
    assert available_row_sources() == ["cross_join", "series"]
    assert resolve_row_source("series").name == "series"


def test_resolve_unknown_row_source():
    try:
        resolve_row_source("nope")
    except ValueError as exc:
        assert "cross_join" in str(exc)
    else:
        raise AssertionError("expected ValueError")


def test_errors_share_a_base_and_name_the_offender():
    for error in (
        InvalidArgument("insert_count", -1),
        UnsupportedColumnType("BLOB", "data"),
        MissingPrimaryKey("s.t"),
    ):
        assert isinstance(error, GenerationError)
    assert "-1" in str(InvalidArgument("insert_count", -1))
    assert "BLOB" in str(UnsupportedColumnType("BLOB"))
