"""Config schema for ant_colony simulation plugin."""

REQUIRED_PARAMS = {
    "agent_count": int,
}

DEFAULTS = {
    "width": 800,
    "height": 600,
    "agent_count": 200,
    "food_capacity": 400,
    # [x_min, y_min, x_max, y_max, count]
    "food_patches": [[560, 120, 640, 200, 150], [120, 380, 200, 460, 150]],
    "home_x": 400.0,
    "home_y": 300.0,
    "home_radius": 20.0,
    "max_speed": 60.0,
    "steer_strength": 200.0,
    "wander_strength": 0.2,
    "vision_radius": 150.0,
    "decay_rate": 0.009,
    "box_size": 10,
    "box_separation": 5,
    "workers": 1,
}

OPTIONAL_PARAMS = {
    "width": int,
    "height": int,
    "food_capacity": int,
    "food_patches": list,
    "home_x": float,
    "home_y": float,
    "home_radius": float,
    "max_speed": float,
    "steer_strength": float,
    "wander_strength": float,
    "vision_radius": float,
    "decay_rate": float,
    "box_size": int,
    "box_separation": int,
    "workers": int,
}

POSITIVE_PARAMS = (
    "width",
    "height",
    "home_radius",
    "max_speed",
    "steer_strength",
    "vision_radius",
    "box_size",
    "workers",
)

NON_NEGATIVE_PARAMS = (
    "agent_count",
    "food_capacity",
    "wander_strength",
    "decay_rate",
    "box_separation",
)
