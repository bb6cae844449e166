import numpy as np
import pytest

from asciimap.preprocess import (
    adjust_brightness,
    adjust_contrast_channel,
    adjust_pixel,
    adjust_saturation,
    adjust_tones,
    box_blur,
    preprocess,
    sharpen,
)
from asciimap.settings import ConversionSettings

IMPULSE = [0, 0, 0, 0, 255, 0, 0, 0, 0]


def test_zero_blur_is_a_no_op(make_rgb_frame):
    frame = make_rgb_frame([[(0, 0, 0), (255, 128, 7)], [(1, 2, 3), (9, 9, 9)]])
    result = preprocess(frame, ConversionSettings(blur=0))
    assert result.data == frame.data


def test_box_blur_zero_returns_input():
    pixels = np.arange(16, dtype=np.uint8).reshape(2, 2, 4)
    assert box_blur(pixels, 0) is pixels


def test_blur_spreads_single_bright_pixel(make_rgb_frame):
    frame = make_rgb_frame([[(0, 0, 0), (255, 255, 255), (0, 0, 0)]])
    blurred = box_blur(frame.pixels, 1)
    np.testing.assert_array_equal(blurred[:, :, :3], 85)


def test_blur_includes_alpha():
    pixels = np.zeros((1, 3, 4), dtype=np.uint8)
    pixels[0, 0, 3] = 255
    blurred = box_blur(pixels, 1)
    # edge clamping samples the first column twice
    assert blurred[0, :, 3].tolist() == [170, 85, 0]


def test_blur_keeps_uniform_image(make_solid_frame):
    frame = make_solid_frame(5, 4, (40, 80, 120, 255))
    blurred = box_blur(frame.pixels, 7)
    np.testing.assert_array_equal(blurred, frame.pixels)


@pytest.mark.parametrize(
    "amount, expected",
    [
        # two passes of radius 2
        (4, [10, 20, 31, 41, 51, 41, 31, 20, 10]),
        # five passes of radius 2, bytes rounded after every 1-D pass
        (10, [23, 25, 28, 31, 32, 31, 28, 25, 23]),
    ],
)
def test_multi_pass_blur_values(make_rgb_frame, amount, expected):
    frame = make_rgb_frame([[(v, v, v) for v in IMPULSE]])
    blurred = box_blur(frame.pixels, amount)
    assert blurred[0, :, 0].tolist() == expected
    np.testing.assert_array_equal(blurred[0, :, 0], blurred[0, :, 2])
    np.testing.assert_array_equal(blurred[:, :, 3], 255)


def test_multi_pass_blur_runs_vertically(make_rgb_frame):
    frame = make_rgb_frame([[(v, v, v)] for v in IMPULSE])
    blurred = box_blur(frame.pixels, 4)
    assert blurred[:, 0, 1].tolist() == [10, 20, 31, 41, 51, 41, 31, 20, 10]


def test_blur_does_not_mutate_input(make_rgb_frame):
    frame = make_rgb_frame([[(0, 0, 0), (255, 255, 255)]])
    before = frame.data
    preprocess(frame, ConversionSettings(blur=3))
    assert frame.data == before


def test_sharpen_zero_is_a_no_op():
    pixels = np.full((2, 2, 4), 100, dtype=np.uint8)
    assert sharpen(pixels, 0) is pixels


def test_sharpen_kernel_on_uniform_image():
    pixels = np.full((3, 3, 4), 100, dtype=np.uint8)
    pixels[:, :, 3] = 200
    result = sharpen(pixels, 1)
    # centre 1.8 and eight neighbours at -0.2 leave 0.2 of the value
    np.testing.assert_array_equal(result[:, :, :3], 20)
    np.testing.assert_array_equal(result[:, :, 3], 200)


def test_sharpen_clamps_to_byte_range():
    pixels = np.full((2, 2, 4), 100, dtype=np.uint8)
    result = sharpen(pixels, 10)
    np.testing.assert_array_equal(result[:, :, :3], 0)


def test_sharpen_boosts_isolated_pixel():
    pixels = np.zeros((3, 3, 4), dtype=np.uint8)
    pixels[1, 1, :3] = 100
    result = sharpen(pixels, 1)
    assert result[1, 1, 0] == 180
    assert result[0, 0, 0] == 0


def test_preprocess_applies_blur_before_sharpen(make_rgb_frame):
    frame = make_rgb_frame([[(0, 0, 0), (255, 255, 255), (0, 0, 0)]])
    expected = sharpen(box_blur(frame.pixels, 2), 1)
    result = preprocess(frame, ConversionSettings(blur=2, sharpen=1))
    np.testing.assert_array_equal(result.pixels, expected)


def test_brightness_offset_and_clamp():
    assert adjust_brightness(100, 0, 250, 50) == pytest.approx((227.5, 127.5, 255))
    assert adjust_brightness(10, 20, 30, -100) == (0, 0, 0)


def test_contrast_curve():
    assert adjust_contrast_channel(127.5, 1.7) == 128
    assert adjust_contrast_channel(0, 1) == 12
    assert adjust_contrast_channel(255, 1) == 243
    # zero contrast flattens everything to mid grey
    assert adjust_contrast_channel(0, 0) == 128
    assert adjust_contrast_channel(255, 0) == 128


def test_saturation_leaves_grey_untouched():
    assert adjust_saturation(128, 128, 128, 100) == (128, 128, 128)


def test_full_desaturation():
    assert adjust_saturation(255, 0, 0, -100) == (128, 128, 128)


def test_saturation_boost_is_capped():
    assert adjust_saturation(255, 0, 0, 100) == (255, 0, 0)


def test_saturation_boost_moves_away_from_grey():
    r, g, b = adjust_saturation(150, 100, 100, 50)
    assert r > 150
    assert g < 100
    assert g == b


def test_shadows_lift_black():
    assert adjust_tones(0, 0, 0, highlights=0, shadows=100, midtones=0) == pytest.approx((2.55, 2.55, 2.55))


def test_highlights_only_touch_bright_pixels():
    assert adjust_tones(0, 0, 0, highlights=100, shadows=0, midtones=0) == (0, 0, 0)
    assert adjust_tones(255, 255, 255, highlights=-100, shadows=0, midtones=0) == pytest.approx(
        (252.45, 252.45, 252.45)
    )


def test_midtones_peak_at_half_luminance():
    r, g, b = adjust_tones(127.5, 127.5, 127.5, highlights=0, shadows=0, midtones=100)
    assert r == pytest.approx(130.05, abs=1e-6)


def test_adjust_pixel_neutral_settings_is_identity():
    assert adjust_pixel(12, 34, 56, ConversionSettings()) == (12, 34, 56)


def test_adjust_pixel_order():
    settings = ConversionSettings(brightness=10, contrast=1.5, saturation=-40, shadows=20)
    r, g, b = adjust_brightness(200, 40, 90, 10)
    r, g, b = (adjust_contrast_channel(c, 1.5) for c in (r, g, b))
    r, g, b = adjust_saturation(r, g, b, -40)
    expected = adjust_tones(r, g, b, 0, 20, 0)
    assert adjust_pixel(200, 40, 90, settings) == expected
