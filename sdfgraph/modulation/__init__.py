from sdfgraph.modulation.matrix import (
    ModulationRule, evaluate, modulate_value, group_rules, target_key,
)
