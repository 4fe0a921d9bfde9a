import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np


class FigureManager:
    """one shared off-screen figure, reused for every solver frame"""
    _instance = None

    def __new__(cls, figsize=(8, 8), dpi=100):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance.fig, instance.ax = plt.subplots(figsize=figsize, dpi=dpi)
            cls._instance = instance
        return cls._instance

    def get_figure_ax(self):
        return self.fig, self.ax

    def show_image(self, image: np.ndarray, title: str = ""):
        self.ax.cla()
        # nearest keeps single pixel tiles crisp
        self.ax.imshow(image, cmap="gray" if image.ndim == 2 else None, interpolation="nearest")
        self.ax.set_axis_off()
        self.ax.set_title(title)

    def save(self, filename):
        self.fig.savefig(filename, bbox_inches="tight")

    @classmethod
    def close(cls):
        if cls._instance is not None:
            plt.close(cls._instance.fig)
            cls._instance = None
