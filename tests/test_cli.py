from PIL import Image

from asciimap.cli import build_parser, main, settings_from_args
from asciimap.charsets import BLOCKS
from asciimap.settings import ColourMode, MappingMethod


def save_image(tmp_path, size=(40, 20), colour=(255, 255, 255)):
    path = tmp_path / "input.png"
    Image.new("RGB", size, colour).save(path)
    return path


def test_plain_output_dimensions(tmp_path, capsys):
    path = save_image(tmp_path)
    assert main([str(path), "-s", "10"]) == 0
    lines = capsys.readouterr().out.rstrip("\n").split("\n")
    # 40x20 at 10 columns with half-height correction -> 10x2
    assert len(lines) == 2
    assert lines == ["@" * 10] * 2


def test_colour_output(tmp_path, capsys):
    path = save_image(tmp_path, colour=(255, 0, 0))
    assert main([str(path), "-s", "4", "-c", "--original-colours"]) == 0
    assert "\033[38;2;255;0;0m" in capsys.readouterr().out


def test_stats_go_to_stderr(tmp_path, capsys):
    path = save_image(tmp_path)
    main([str(path), "-s", "6", "--stats"])
    err = capsys.readouterr().err
    assert "6x1" in err
    assert "cells" in err


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.png")]) == 1
    assert "File not found" in capsys.readouterr().err


def test_settings_from_args():
    args = build_parser().parse_args(
        [
            "img.png",
            "--ramp",
            "blocks",
            "--method",
            "edge-detection",
            "--invert",
            "--fg-palette",
            "#000000, #FFFFFF",
            "--fg-mode",
            "by-index",
            "--bg-palette",
            "#101010",
            "--blur",
            "2.5",
        ]
    )
    settings = settings_from_args(args)
    assert settings.character_ramp == BLOCKS
    assert settings.mapping_method is MappingMethod.EDGE_DETECTION
    assert settings.invert_density
    assert settings.enable_text_colour_mapping
    assert settings.text_colour_palette == ("#000000", "#FFFFFF")
    assert settings.text_colour_mode is ColourMode.BY_INDEX
    assert settings.enable_background_colour_mapping
    assert settings.blur == 2.5


def test_literal_ramp():
    args = build_parser().parse_args(["img.png", "--ramp", " .oO"])
    assert settings_from_args(args).character_ramp == (" ", ".", "o", "O")
