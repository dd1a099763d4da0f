"""Tests for the preview module.

This module tests the preview/display and preview/export functionality including:
- Gamma correction
- 8-bit conversion
- PPM and PNG export
- RMSE computation
- Matplotlib preview on a non-interactive backend
"""

import numpy as np
import pytest
from PIL import Image as PILImage


class TestApplyGamma:
    """Test gamma correction."""

    def test_gamma_one_is_identity(self):
        from src.mirrortrace.preview.display import apply_gamma

        image = np.random.default_rng(0).random((4, 4, 3)).astype(np.float32)
        assert apply_gamma(image, 1.0) is image

    def test_gamma_brightens_midtones(self):
        from src.mirrortrace.preview.display import apply_gamma

        image = np.full((2, 2, 3), 0.25, dtype=np.float32)
        result = apply_gamma(image, 2.0)
        assert np.allclose(result, 0.5, atol=1e-6)

    def test_gamma_clamps_before_power(self):
        from src.mirrortrace.preview.display import apply_gamma

        image = np.array([[[-1.0, 0.0, 2.0]]], dtype=np.float32)
        result = apply_gamma(image, 2.2)
        assert not np.any(np.isnan(result))
        assert result.min() == 0.0 and result.max() == 1.0

    def test_invalid_gamma(self):
        from src.mirrortrace.preview.display import apply_gamma

        with pytest.raises(ValueError):
            apply_gamma(np.zeros((1, 1, 3), dtype=np.float32), 0.0)


class TestImageToUint8:
    """Test float to 8-bit conversion."""

    def test_truncates_after_clamp(self):
        from src.mirrortrace.preview.export import image_to_uint8

        image = np.array([[[1.0, 0.5, 0.0], [2.0, -1.0, 0.999]]], dtype=np.float32)
        result = image_to_uint8(image)
        assert result.dtype == np.uint8
        assert result.tolist() == [[[255, 127, 0], [255, 0, 254]]]

    def test_rejects_wrong_shape(self):
        from src.mirrortrace.preview.export import image_to_uint8

        with pytest.raises(ValueError):
            image_to_uint8(np.zeros((4, 4), dtype=np.float32))


class TestSavePPM:
    """Test ASCII PPM export."""

    def test_header_and_scan_order(self, tmp_path):
        from src.mirrortrace.preview.export import save_ppm

        # 2 wide, 2 tall: top row red, green; bottom row blue, white
        image = np.array(
            [
                [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]],
                [[0.0, 0.0, 1.0], [1.0, 1.0, 1.0]],
            ],
            dtype=np.float32,
        )
        path = tmp_path / "out.ppm"
        save_ppm(image, path)

        assert path.read_text() == (
            "P3\n2 2\n255\n"
            "255 0 0\n"
            "0 255 0\n"
            "0 0 255\n"
            "255 255 255\n"
        )

    def test_non_square_dimensions(self, tmp_path):
        from src.mirrortrace.preview.export import save_ppm

        path = tmp_path / "wide.ppm"
        save_ppm(np.zeros((2, 5, 3), dtype=np.float32), path)
        lines = path.read_text().splitlines()
        assert lines[1] == "5 2"
        assert len(lines) == 3 + 10

    def test_load_ppm_reads_back(self, tmp_path):
        from src.mirrortrace.preview.export import image_to_uint8, load_ppm, save_ppm

        image = np.random.default_rng(1).random((3, 4, 3)).astype(np.float32)
        path = tmp_path / "img.ppm"
        save_ppm(image, path)
        assert np.array_equal(load_ppm(path), image_to_uint8(image))

    def test_load_ppm_rejects_other_formats(self, tmp_path):
        from src.mirrortrace.preview.export import load_ppm

        path = tmp_path / "binary.ppm"
        path.write_text("P6\n1 1\n255\n")
        with pytest.raises(ValueError):
            load_ppm(path)


class TestSavePNG:
    """Test PNG export."""

    def test_png_written(self, tmp_path):
        from src.mirrortrace.preview.export import save_png

        image = np.full((6, 8, 3), 0.5, dtype=np.float32)
        path = tmp_path / "out.png"
        save_png(image, path)

        with PILImage.open(path) as img:
            assert img.size == (8, 6)
            assert img.mode == "RGB"
            assert img.getpixel((0, 0)) == (127, 127, 127)

    def test_png_gamma(self, tmp_path):
        from src.mirrortrace.preview.export import save_png

        image = np.full((2, 2, 3), 0.25, dtype=np.float32)
        path = tmp_path / "gamma.png"
        save_png(image, path, gamma=2.0)

        with PILImage.open(path) as img:
            assert img.getpixel((0, 0)) == (127, 127, 127)


class TestComputeRMSE:
    """Test RMSE computation."""

    def test_identical_images(self):
        from src.mirrortrace.preview.export import compute_rmse

        image = np.full((4, 4, 3), 0.3, dtype=np.float32)
        assert compute_rmse(image, image) == 0.0

    def test_known_difference(self):
        from src.mirrortrace.preview.export import compute_rmse

        a = np.zeros((4, 4, 3), dtype=np.float32)
        b = np.full((4, 4, 3), 0.5, dtype=np.float32)
        assert compute_rmse(a, b) == pytest.approx(0.5)

    def test_shape_mismatch(self):
        from src.mirrortrace.preview.export import compute_rmse

        with pytest.raises(ValueError, match="shapes must match"):
            compute_rmse(np.zeros((2, 2, 3)), np.zeros((3, 2, 3)))


class TestMatplotlibPreview:
    """Display functions on the non-interactive Agg backend."""

    @pytest.fixture(autouse=True)
    def agg_backend(self):
        import matplotlib

        matplotlib.use("Agg")
        yield
        import matplotlib.pyplot as plt

        plt.close("all")

    @pytest.mark.filterwarnings("ignore::UserWarning")
    def test_show_preview_returns_figure(self):
        from src.mirrortrace.preview.display import show_preview

        image = np.zeros((6, 8, 3), dtype=np.float32)
        fig = show_preview(image, block=False)
        assert fig.axes[0].get_title() == "Render Preview - 8x6"

    @pytest.mark.filterwarnings("ignore::UserWarning")
    def test_show_comparison_returns_rmse(self):
        from src.mirrortrace.preview.display import show_comparison

        a = np.zeros((4, 4, 3), dtype=np.float32)
        b = np.full((4, 4, 3), 0.5, dtype=np.float32)
        assert show_comparison(a, b, block=False) == pytest.approx(0.5)
