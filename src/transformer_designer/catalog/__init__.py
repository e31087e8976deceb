"""Reference Catalogs

Static material, conductor and pricing data for transformer design:
- Electrical steel grades and conductor properties
- AWG, rectangular strip and CTC conductor sizes
- Budgetary pricing for materials, labour and overhead

Lookups return LookupResult so that fallbacks to default entries are
reported rather than hidden.
"""

from transformer_designer.catalog.lookup import (
    LookupResult,
    UnknownKeyWarning,
    lookup,
)

from transformer_designer.catalog.materials import (
    SteelGrade,
    ConductorProperties,
    CurrentDensityBand,
    RadiatorPanel,
    STEEL_GRADES,
    CONDUCTOR_PROPERTIES,
    CURRENT_DENSITY_BY_COOLING,
    OIL_VOLUME_CONSTANT,
    RADIATOR_SIZES,
    TRANSFORMER_OIL,
    get_steel_grade,
    get_conductor_properties,
    get_current_density_band,
    get_oil_volume_constant,
    get_bil_level,
    has_forced_air,
    normalize_cooling_class,
)

from transformer_designer.catalog.conductors import (
    ConductorShape,
    ConductorSize,
    AWG_TABLE,
    RECTANGULAR_CONDUCTORS,
    CTC_CONDUCTORS,
    select_conductor,
    recommend_conductor_shape,
)

from transformer_designer.catalog.pricing import (
    ManufacturingRegion,
    MANUFACTURING_REGIONS,
    get_bushing_price,
    get_tap_changer_cost,
)

__all__ = [
    # Lookup results
    "LookupResult",
    "UnknownKeyWarning",
    "lookup",
    # Materials
    "SteelGrade",
    "ConductorProperties",
    "CurrentDensityBand",
    "RadiatorPanel",
    "STEEL_GRADES",
    "CONDUCTOR_PROPERTIES",
    "CURRENT_DENSITY_BY_COOLING",
    "OIL_VOLUME_CONSTANT",
    "RADIATOR_SIZES",
    "TRANSFORMER_OIL",
    "get_steel_grade",
    "get_conductor_properties",
    "get_current_density_band",
    "get_oil_volume_constant",
    "get_bil_level",
    "has_forced_air",
    "normalize_cooling_class",
    # Conductors
    "ConductorShape",
    "ConductorSize",
    "AWG_TABLE",
    "RECTANGULAR_CONDUCTORS",
    "CTC_CONDUCTORS",
    "select_conductor",
    "recommend_conductor_shape",
    # Pricing
    "ManufacturingRegion",
    "MANUFACTURING_REGIONS",
    "get_bushing_price",
    "get_tap_changer_cost",
]
