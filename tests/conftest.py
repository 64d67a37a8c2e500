import pytest

from stickercut.pipeline import PipelineConfig, PipelineLogger

from sheets import encode_png, grid_centers, make_sheet


@pytest.fixture
def logger(tmp_path):
    return PipelineLogger(log_file=tmp_path / "debug.log")


@pytest.fixture
def started_logger(logger):
    logger.start_image("test")
    return logger


@pytest.fixture
def png_config():
    return PipelineConfig(output_format="PNG")


@pytest.fixture
def nine_squares():
    return encode_png(make_sheet(grid_centers()))
