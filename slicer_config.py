from dataclasses import dataclass

DEFAULT_LAYER_HEIGHT = 0.2
EPSILON = 1e-6


@dataclass
class SlicerConfig:
    """Settings shared by the validator and the layer slicer.

    anchor_to_origin places layer planes at multiples of layer_height from
    absolute Z = 0 instead of from the mesh's lowest point.
    """

    layer_height: float = DEFAULT_LAYER_HEIGHT
    epsilon: float = EPSILON
    anchor_to_origin: bool = False

    def validate(self):
        if self.layer_height <= 0:
            raise ValueError(f"Layer height must be positive, got {self.layer_height}")
        if self.epsilon <= 0:
            raise ValueError(f"Epsilon must be positive, got {self.epsilon}")
        return self
