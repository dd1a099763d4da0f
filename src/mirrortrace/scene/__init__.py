"""Scene module for shape storage, hit queries and scene construction.

Components:
    intersection: Shape store and nearest-hit query
    manager: Scene manager coordinating shapes, lights and render settings
    default_scene: The demo scene

Scene data is organized for efficient parallel access:
    - Structure-of-Arrays layout for shape and light data
    - A kind tag per shape for sphere/plane dispatch
    - Read-only during rendering
"""

from .default_scene import DefaultSceneParams, create_default_scene
from .intersection import (
    MAX_SHAPES,
    Hit,
    SceneHit,
    ShapeKind,
    add_plane,
    add_sphere,
    clear_scene,
    get_shape_count,
    make_hit,
    make_miss,
    trace,
    trace_scene,
)
from .manager import (
    LightInfo,
    PlaneInfo,
    SceneConfig,
    SceneManager,
    SphereInfo,
)

__all__ = [
    # Intersection module
    "ShapeKind",
    "SceneHit",
    "Hit",
    "MAX_SHAPES",
    "add_sphere",
    "add_plane",
    "clear_scene",
    "get_shape_count",
    "make_hit",
    "make_miss",
    "trace_scene",
    "trace",
    # Manager module
    "SceneManager",
    "SceneConfig",
    "SphereInfo",
    "PlaneInfo",
    "LightInfo",
    # Default scene
    "DefaultSceneParams",
    "create_default_scene",
]
