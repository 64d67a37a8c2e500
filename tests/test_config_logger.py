import json

import pytest

from stickercut.pipeline import PipelineConfig, PipelineLogger


def test_defaults():
    config = PipelineConfig()
    assert (config.rows, config.cols, config.feather_px) == (3, 3, 10)
    assert config.adaptive_grid is False
    assert config.feather_kernel_size == 21
    assert config.output_extension == ".webp"


def test_format_and_edge_are_normalized():
    config = PipelineConfig(output_format="png", feather_edge="Reflect")
    assert config.output_format == "PNG"
    assert config.feather_edge == "reflect"
    assert config.output_extension == ".png"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"rows": 0},
        {"cols": -1},
        {"feather_px": -1},
        {"feather_edge": "wrap"},
        {"bg_tolerance": 300},
        {"bg_connectivity": 6},
        {"bg_seed_points": ()},
        {"max_workers": 0},
        {"output_format": "JPEG"},
        {"adaptive_small_grid": (0, 2)},
    ],
)
def test_invalid_values_are_rejected(kwargs):
    with pytest.raises(ValueError):
        PipelineConfig(**kwargs)


def test_stage_log_requires_started_image():
    logger = PipelineLogger()
    with pytest.raises(RuntimeError):
        logger.log_stage("s1_normalize", channels=4)


def test_logger_without_file_keeps_records_in_memory():
    logger = PipelineLogger()
    logger.start_image("a.png")
    logger.log_stage("s3_contours", num_contours=2)
    logger.save_image_log()

    assert logger.current_image is None
    assert logger.logs[0]["stages"][0]["num_contours"] == 2


def test_logger_appends_json_lines(tmp_path):
    log_file = tmp_path / "nested" / "debug.log"
    logger = PipelineLogger(log_file=log_file)

    for name in ("a.png", "b.png"):
        logger.start_image(name)
        logger.log_region_error("s5_composite", (0, 1), "Zero-area crop")
        logger.save_image_log()

    records = [json.loads(line) for line in log_file.read_text().splitlines()]
    assert [r["image"] for r in records] == ["a.png", "b.png"]
    assert records[0]["region_errors"] == [
        {"stage": "s5_composite", "cell": [0, 1], "error": "Zero-area crop"}
    ]


def test_debug_mode_echoes_stages(capsys):
    logger = PipelineLogger(debug_mode=True)
    logger.start_image("a.png")
    logger.log_stage("s4_grid", rows=2, cols=2)

    assert "[s4_grid]" in capsys.readouterr().out


def test_output_dir_string_is_coerced_to_path(tmp_path):
    config = PipelineConfig(output_dir=str(tmp_path / "out"))
    assert config.output_dir == tmp_path / "out"
