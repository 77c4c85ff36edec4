"""Vectorized escape-time evaluation of whole rows with TensorFlow."""

from __future__ import annotations

import logging
from typing import Iterator, Optional

import numpy as np
import tensorflow as tf

from .colors import colorize
from .config import RenderConfig
from .escape import PixelSample, smooth
from .renderer import Row
from .viewport import map_pixel_to_complex

logger = logging.getLogger(__name__)

CPU_DEVICE = "/CPU:0"


def available_device(prefer_gpu: bool = False) -> str:
    """Return the device to evaluate on.

    GPU kernels may fuse multiply-adds, so results are only bit-identical to
    the scalar evaluator on the CPU.
    """

    if not prefer_gpu:
        return CPU_DEVICE
    gpus = tf.config.list_physical_devices("GPU")
    if not gpus:
        logger.debug("No GPU found, using CPU")
        return CPU_DEVICE
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as exc:
        # Memory growth must be set before the GPU is initialized.
        logger.debug("Could not configure %s: %s", gpus[0].name, exc)
    logger.debug("GPU found, using %s", gpus[0].name)
    return "/GPU:0"


@tf.function
def _escape_step(
    z_real: tf.Tensor,
    z_imag: tf.Tensor,
    counts: tf.Tensor,
    active: tf.Tensor,
    c_real: tf.Tensor,
    c_imag: tf.Tensor,
    max_iterations: tf.Tensor,
    escape_bound: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every point that has neither escaped nor hit the iteration cap."""

    next_real = z_real * z_real - z_imag * z_imag + c_real
    next_imag = 2.0 * z_real * z_imag + c_imag
    z_real = tf.where(active, next_real, z_real)
    z_imag = tf.where(active, next_imag, z_imag)
    counts = counts + tf.cast(active, counts.dtype)
    magnitude = z_real * z_real + z_imag * z_imag
    active = tf.logical_and(magnitude <= escape_bound, counts < max_iterations)
    return z_real, z_imag, counts, active


@tf.function
def _escape_run(
    c_real: tf.Tensor,
    c_imag: tf.Tensor,
    max_iterations: tf.Tensor,
    escape_bound: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor]:
    z_real = tf.zeros_like(c_real)
    z_imag = tf.zeros_like(c_real)
    counts = tf.zeros_like(c_real)
    active = tf.fill(tf.shape(c_real), tf.greater(max_iterations, 0.0))

    def cond(z_real, z_imag, counts, active):
        return tf.reduce_any(active)

    def body(z_real, z_imag, counts, active):
        return _escape_step(z_real, z_imag, counts, active, c_real, c_imag, max_iterations, escape_bound)

    z_real, z_imag, counts, _ = tf.while_loop(cond, body, (z_real, z_imag, counts, active))
    return counts, z_real, z_imag


def evaluate_row(
    reals: np.ndarray,
    imag: float,
    max_iterations: int,
    escape_bound: float,
    *,
    device: Optional[str] = None,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Evaluate the escape time of every ``reals[i] + imag*i`` at once.

    Returns ``(counts, z_real, z_imag)`` arrays with the same meaning as
    :func:`mandelbrot_raster.escape.evaluate` per element.
    """

    reals = np.asarray(reals, dtype=np.float64)
    with tf.device(device if device is not None else CPU_DEVICE):
        c_real = tf.convert_to_tensor(reals, dtype=tf.float64)
        c_imag = tf.fill(tf.shape(c_real), tf.constant(imag, dtype=tf.float64))
        counts, z_real, z_imag = _escape_run(
            c_real,
            c_imag,
            tf.constant(max_iterations, dtype=tf.float64),
            tf.constant(escape_bound, dtype=tf.float64),
        )
    return counts.numpy(), z_real.numpy(), z_imag.numpy()


def render_rows_accelerated(config: RenderConfig, *, device: Optional[str] = None) -> Iterator[Row]:
    """Yield frame rows like :func:`mandelbrot_raster.renderer.render_rows`.

    Each row is iterated as one tensor; smoothing and coloring stay scalar.
    """

    device = device if device is not None else CPU_DEVICE
    logger.debug("Rendering %dx%d frame with TensorFlow on %s", config.width, config.height, device)
    for y in range(config.height):
        reals = np.array(
            [map_pixel_to_complex(x, y, config)[0] for x in range(config.width)],
            dtype=np.float64,
        )
        _, imag = map_pixel_to_complex(0, y, config)
        counts, z_real, z_imag = evaluate_row(
            reals, imag, config.max_iterations, config.escape_bound, device=device
        )
        yield tuple(
            colorize(
                PixelSample(
                    final_real=zr,
                    final_imag=zi,
                    escape_value=smooth(count, zr, zi, config.max_iterations),
                ),
                config.mode,
            )
            for count, zr, zi in zip(counts.tolist(), z_real.tolist(), z_imag.tolist())
        )
