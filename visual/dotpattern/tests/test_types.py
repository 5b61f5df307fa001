import pytest
from PIL import Image

from visual.dotpattern import (
    GridParameters,
    PreviewParameters,
    RenderMode,
    all_mode_names,
    get_mode_name,
    parse_color,
    parse_mode_name,
    process,
)


def test_dot_radius_formula():
    for cell_size in range(1, 40):
        for padding in range(0, cell_size):
            params = GridParameters(cell_size=cell_size, padding=padding)
            assert params.dot_radius == max(1, (cell_size - padding) / 2)


def test_dot_radius_clamps_when_padding_too_large():
    assert GridParameters(cell_size=4, padding=4).dot_radius == 1
    assert GridParameters(cell_size=4, padding=9).dot_radius == 1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"cell_size": 0},
        {"cell_size": 2.5},
        {"padding": -1},
        {"contrast": -0.1},
        {"saturation": float("nan")},
        {"background": (256, 0, 0)},
        {"background": (0, 0)},
    ],
)
def test_grid_parameters_validation(kwargs):
    with pytest.raises(ValueError):
        GridParameters(**kwargs).validate()


def test_valid_parameters_pass():
    params = GridParameters(cell_size=5, padding=5, contrast=0, saturation=3)
    assert params.validate() is params


def test_preview_parameters_validation():
    assert PreviewParameters().step == 22
    with pytest.raises(ValueError):
        PreviewParameters(radius=0).validate()
    with pytest.raises(ValueError):
        PreviewParameters(size=0).validate()
    with pytest.raises(ValueError):
        PreviewParameters(accent=(0, 0, 300)).validate()


def test_parse_color():
    assert parse_color("#ff0000") == (255, 0, 0)
    assert parse_color("#0f0") == (0, 255, 0)
    assert parse_color("black") == (0, 0, 0)
    assert parse_color(" rgb(1, 2, 3) ") == (1, 2, 3)
    with pytest.raises(ValueError):
        parse_color("not-a-color")


def test_mode_names():
    assert all_mode_names() == ["full", "preview", "source"]
    for name in all_mode_names():
        assert get_mode_name(parse_mode_name(name)) == name
    with pytest.raises(ValueError):
        parse_mode_name("halftone")


def test_process_dispatch(uniform_image):
    assert process(uniform_image, RenderMode.FULL, GridParameters()).size == (100, 100)
    assert process(None, RenderMode.PREVIEW, PreviewParameters(size=50)).size == (50, 50)
    assert process(uniform_image, RenderMode.SOURCE, 20).size == (20, 20)


def test_process_rejects_mismatched_params(uniform_image):
    with pytest.raises(ValueError):
        process(uniform_image, RenderMode.FULL, PreviewParameters())
    with pytest.raises(ValueError):
        process(None, RenderMode.PREVIEW, GridParameters())
    with pytest.raises(ValueError):
        process(None, RenderMode.FULL, GridParameters())
    with pytest.raises(ValueError):
        process(Image.new("RGB", (4, 4)), RenderMode.SOURCE, 2.5)
