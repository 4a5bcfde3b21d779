"""
Unit tests for image ingestion, the TerrainGenerator and the CLI.
"""

import io
import json
import sys
import tempfile
from contextlib import redirect_stdout, redirect_stderr
from pathlib import Path
import numpy as np
import unittest
from PIL import Image, UnidentifiedImageError

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from heightmap_terrain import TerrainGenerator, synthesize
from heightmap_terrain.cli import main
from heightmap_terrain.errors import InputShapeError, ParameterError
from heightmap_terrain.ingestion import PixelSampler, to_eight_bit


def hills_image(size: int = 32) -> np.ndarray:
    """Radial gray dome, bright in the middle."""
    rows, cols = np.indices((size, size))
    center = (size - 1) / 2
    dist = np.sqrt((rows - center) ** 2 + (cols - center) ** 2)
    values = np.clip(255 * (1 - dist / dist.max()), 0, 255).astype(np.uint8)
    return np.stack([values] * 3, axis=-1)


class TestPixelSampler(unittest.TestCase):
    """Tests for image decoding and resampling."""

    def test_array_at_target_size(self):
        """Test an image already R x R passes through unchanged."""
        image = np.random.default_rng(0).integers(0, 256, size=(4, 4, 3)).astype(np.uint8)
        sampler = PixelSampler(resolution=4).load_from_array(image)

        assert sampler.pixels.shape == (16, 3)
        assert np.array_equal(sampler.pixels, image.reshape(-1, 3))
        assert sampler.original_size == (4, 4)

    def test_array_resampled(self):
        """Test a larger non-square image is stretched to R x R."""
        image = np.zeros((20, 30, 3), dtype=np.uint8)
        sampler = PixelSampler(resolution=8).load_from_array(image)

        assert sampler.pixels.shape == (64, 3)
        assert sampler.as_grid().shape == (8, 8, 3)
        assert sampler.original_size == (30, 20)

    def test_grayscale_and_rgba(self):
        """Test single-channel and RGBA arrays become RGB."""
        gray = np.full((4, 4), 90, dtype=np.uint8)
        assert np.all(PixelSampler(4).load_from_array(gray).pixels == 90)

        rgba = np.zeros((4, 4, 4), dtype=np.uint8)
        rgba[..., 0] = 200
        pixels = PixelSampler(4).load_from_array(rgba).pixels
        assert np.all(pixels[:, 0] == 200)
        assert pixels.shape == (16, 3)

    def test_load_file(self):
        """Test decoding a PNG from disk."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "dome.png"
            Image.fromarray(hills_image(16)).save(path)

            sampler = PixelSampler(resolution=16, resample="nearest").load(path)
            assert np.array_equal(sampler.pixels, hills_image(16).reshape(-1, 3))

    def test_sixteen_bit_grayscale(self):
        """Test a 16-bit PNG keeps its gradations instead of clipping."""
        ramp = np.linspace(0, 65535, 16).astype(np.uint16).reshape(4, 4)
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "ramp16.png"
            Image.fromarray(ramp).save(path)

            pixels = PixelSampler(4, resample="nearest").load(path).pixels

        levels = pixels[:, 0]
        assert len(np.unique(levels)) == 16
        assert np.all(np.diff(levels.astype(int)) > 0)
        assert levels[0] == 0 and levels[-1] == 255
        assert np.array_equal(levels, ramp.ravel() >> 8)
        assert np.array_equal(pixels[:, 0], pixels[:, 2])

    def test_float_image_stretched(self):
        """Test mode F samples are stretched onto 0-255."""
        ramp = np.linspace(-1.0, 3.0, 16, dtype=np.float32).reshape(4, 4)
        img = to_eight_bit(Image.fromarray(ramp))

        assert img.mode == "L"
        values = np.asarray(img)
        assert values.min() == 0 and values.max() == 255
        assert len(np.unique(values)) == 16

        flat = to_eight_bit(Image.fromarray(np.full((4, 4), 7.5, dtype=np.float32)))
        assert np.all(np.asarray(flat) == 0)

    def test_eight_bit_modes_untouched(self):
        """Test 8-bit images pass through unchanged."""
        img = Image.fromarray(hills_image(4))
        assert to_eight_bit(img) is img

    def test_array_dtype(self):
        """Test non-uint8 arrays are rejected rather than wrapped."""
        with self.assertRaises(InputShapeError):
            PixelSampler(4).load_from_array(np.full((4, 4, 3), 0.5))
        with self.assertRaises(InputShapeError):
            PixelSampler(4).load_from_array(np.full((4, 4), 300, dtype=np.int32))

    def test_missing_file(self):
        """Test a missing file fails outright."""
        with self.assertRaises(FileNotFoundError):
            PixelSampler(8).load("/nonexistent/heightmap.png")

    def test_unreadable_file(self):
        """Test a non-image file fails outright."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "junk.png"
            path.write_bytes(b"not an image")
            with self.assertRaises(UnidentifiedImageError):
                PixelSampler(8).load(path)

    def test_invalid_arguments(self):
        """Test bad resolution, filter and array shapes."""
        with self.assertRaises(InputShapeError):
            PixelSampler(resolution=1)
        with self.assertRaises(ValueError):
            PixelSampler(resample="cubic-spline")
        with self.assertRaises(InputShapeError):
            PixelSampler(4).load_from_array(np.zeros((4, 4, 2), dtype=np.uint8))

    def test_no_image(self):
        """Test accessing pixels before loading."""
        with self.assertRaises(RuntimeError):
            PixelSampler(4).pixels


class TestTerrainGenerator(unittest.TestCase):
    """Integration tests for TerrainGenerator."""

    def test_basic_pipeline(self):
        """Test load -> generate."""
        generator = TerrainGenerator(resolution=16, height_scale=10)
        generator.load_array(hills_image(32)).generate()

        assert generator.vertex_count == 256
        assert generator.triangle_count == 2 * 15 * 15
        assert generator.statistics.contrast > 0.7
        assert generator.heightfield.shape == (16, 16)

    def test_matches_synthesize(self):
        """Test the generator produces the same buffers as synthesize()."""
        image = hills_image(8)
        generator = TerrainGenerator(resolution=8, height_scale=7).load_array(image).generate()
        direct = synthesize(image.reshape(-1, 3), 8, 7)

        for a, b in zip(generator.geometry, direct):
            assert np.array_equal(a, b)

    def test_rescale(self):
        """Test changing height scale keeps colors."""
        generator = TerrainGenerator(resolution=8).load_array(hills_image(8)).generate()
        before = generator.geometry

        generator.set_height_scale(30).generate()
        after = generator.geometry

        assert np.array_equal(before.colors, after.colors)
        assert after.heights().max() > before.heights().max()

    def test_generate_without_image(self):
        """Test generate() before loading."""
        with self.assertRaises(RuntimeError):
            TerrainGenerator(resolution=4).generate()

    def test_invalid_height_scale(self):
        """Test non-positive height scale."""
        with self.assertRaises(ParameterError):
            TerrainGenerator(height_scale=0)
        with self.assertRaises(ParameterError):
            TerrainGenerator().set_height_scale(-2)

    def test_default_terrain(self):
        """Test the placeholder terrain replaces loaded state."""
        generator = TerrainGenerator(resolution=8).load_array(hills_image(8)).generate()
        generator.generate_default()

        assert generator.vertex_count == 64
        assert generator.statistics is None
        assert generator.heightfield is None

    def test_preview(self):
        """Test the state summary."""
        generator = TerrainGenerator(resolution=4)
        info = generator.preview()
        assert info["image_loaded"] is False
        assert info["generated"] is False

        generator.load_array(hills_image(4)).generate()
        info = generator.preview()
        assert info["generated"] is True
        assert info["vertex_count"] == 16
        assert info["image_size"] == (4, 4)
        assert "contrast" in info and "smoothed" in info


class TestCLI(unittest.TestCase):
    """Tests for the command-line interface."""

    def run_cli(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            status = main(list(argv))
        return status, out.getvalue(), err.getvalue()

    def test_image(self):
        """Test processing an image file."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "dome.png"
            Image.fromarray(hills_image(32)).save(path)

            status, out, _ = self.run_cli(str(path), "-r", "16", "--stats")

        assert status == 0
        assert "Vertices: 256" in out
        assert "Faces: 450" in out
        assert "Biome Distribution" in out

    def test_config_file(self):
        """Test reading constants from JSON."""
        with tempfile.TemporaryDirectory() as tmp:
            image = Path(tmp) / "flat.png"
            Image.fromarray(np.full((8, 8, 3), 128, dtype=np.uint8)).save(image)
            config = Path(tmp) / "config.json"
            config.write_text(json.dumps({"vertical_offset": 2.0}))

            status, out, _ = self.run_cli(str(image), "-r", "4", "--config", str(config))

        assert status == 0
        assert "Height range: 2.000 .. 2.000" in out

    def test_grid(self):
        """Test the checkerboard grid."""
        status, out, _ = self.run_cli("--grid", "4")
        assert status == 0
        assert "Vertices: 16" in out

    def test_default(self):
        """Test the placeholder terrain."""
        status, out, _ = self.run_cli("--default", "-r", "8")
        assert status == 0
        assert "Vertices: 64" in out

    def test_no_input(self):
        """Test missing input."""
        status, _, err = self.run_cli()
        assert status == 1
        assert "No input file" in err

    def test_missing_file(self):
        """Test a nonexistent input path."""
        status, _, err = self.run_cli("/nonexistent/heightmap.png")
        assert status == 1
        assert "not found" in err

    def test_bad_parameters(self):
        """Test errors from the pipeline are reported."""
        status, _, err = self.run_cli("--default", "-s", "0")
        assert status == 1
        assert err.startswith("Error:")


if __name__ == "__main__":
    unittest.main(verbosity=2)
