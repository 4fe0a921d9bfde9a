import os

import matplotlib
matplotlib.use('Agg')
import matplotlib.image as mpimg
import matplotlib.pyplot as plt
import numpy as np


def load_image(path) -> np.ndarray:
    """decode an image file to a (height, width[, channels]) uint8 array"""
    image = mpimg.imread(os.fspath(path))
    if np.issubdtype(image.dtype, np.floating):
        image = np.rint(np.clip(image, 0.0, 1.0) * 255).astype(np.uint8)
    return image


def save_image(path, image: np.ndarray) -> None:
    image = np.asarray(image)
    directory = os.path.dirname(os.fspath(path))
    if directory:
        os.makedirs(directory, exist_ok=True)
    plt.imsave(os.fspath(path), image, cmap="gray" if image.ndim == 2 else None)
