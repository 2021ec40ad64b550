from .path import segment_lengths_km, path_length_km, bounding_box
