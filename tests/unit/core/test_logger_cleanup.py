"""Test that closing the logger releases its file."""

from docforge.core.log import (
    ConsoleSink,
    FileSink,
    LogfireSink,
    OTLPSink,
    logger,
    setup_logger,
)


def test_context_manager_flushes_file(tmp_path):
    log_file = tmp_path / "docforge.log"
    setup_logger(
        log_root=tmp_path,
        run_name="test",
        console=ConsoleSink(enabled=False),
        otlp=OTLPSink(enabled=False),
        file=FileSink(enabled=True, level="info", path=str(log_file)),
        logfire=LogfireSink(enabled=False),
    )

    with logger:
        logger.info("Inside context")

    assert "Inside context" in log_file.read_text()


def test_default_path_uses_run_name(tmp_path):
    """The default file path is {log_root}/{run_name}/docforge.log."""
    active = setup_logger(
        log_root=tmp_path,
        run_name="resume",
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True, level="info"),
    )
    active.info("Hello")
    active.close()

    assert (tmp_path / "resume" / "docforge.log").is_file()


def test_setup_twice_closes_previous(tmp_path):
    first = setup_logger(
        log_root=tmp_path,
        run_name="first",
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True, level="info"),
    )
    handle = first.file._file

    second = setup_logger(
        log_root=tmp_path,
        run_name="second",
        console=ConsoleSink(enabled=False),
    )
    second.close()

    assert handle.closed
