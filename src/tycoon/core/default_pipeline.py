"""Default finance tick pipeline."""

from importlib import resources
from pathlib import Path

from tycoon.core.pipeline import Pipeline


def create_default_pipeline() -> Pipeline:
    """
    Create the default finance tick pipeline.

    Loads the pipeline from the packaged default_pipeline.yml.

    Notes
    -----
    Users can modify the result with insert_after(), remove(), replace(),
    or build their own pipeline from a custom YAML file using
    Pipeline.from_yaml().
    """
    # Importing the package registers the built-in systems
    import tycoon.systems  # noqa: F401

    traversable = resources.files("tycoon") / "default_pipeline.yml"
    with resources.as_file(traversable) as yaml_fs_path:
        return Pipeline.from_yaml(Path(yaml_fs_path))
