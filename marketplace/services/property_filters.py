"""Translate listing query parameters into a property query.

The flat, string-typed query mapping is first parsed into a typed
``PropertyFilter`` and then applied to a SQLAlchemy query. Parameters that
are absent or empty add no constraint.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import math

from sqlalchemy import and_, literal, or_

from marketplace.models.property import Property
from marketplace.utils.errors import ApiError
from marketplace.utils.validators import fits_db_integer

# query parameter -> filter attribute
EXACT_MATCH_PARAMS = {
    'type': 'type',
    'state': 'state',
    'city': 'city',
    'furnished': 'furnished',
    'listedBy': 'listed_by',
    'listingType': 'listing_type',
}

# query parameter -> (filter attribute, cast)
NUMERIC_PARAMS = {
    'minPrice': ('min_price', float),
    'maxPrice': ('max_price', float),
    'minBedrooms': ('min_bedrooms', int),
    'maxBedrooms': ('max_bedrooms', int),
    'minBathrooms': ('min_bathrooms', float),
    'maxBathrooms': ('max_bathrooms', float),
    'minRating': ('min_rating', float),
}

SEARCH_RESULT_LIMIT = 20


@dataclass
class PropertyFilter:
    type: str | None = None
    state: str | None = None
    city: str | None = None
    furnished: str | None = None
    listed_by: str | None = None
    listing_type: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    min_bedrooms: int | None = None
    max_bedrooms: int | None = None
    min_bathrooms: float | None = None
    max_bathrooms: float | None = None
    min_rating: float | None = None
    is_verified: bool | None = None
    amenities: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)


def _parse_number(raw: str, cast):
    value = cast(raw.strip())
    if cast is int:
        if not fits_db_integer(value):
            raise ValueError(raw)
    elif not math.isfinite(value):
        raise ValueError(raw)
    return value


def _split_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(',') if item.strip()]


def parse_property_filter(args) -> PropertyFilter:
    """Build a ``PropertyFilter`` from a query-string mapping.

    Raises a validation ``ApiError`` naming every numeric parameter that
    could not be parsed.
    """
    flt = PropertyFilter()
    errors = []

    for param, attr in EXACT_MATCH_PARAMS.items():
        value = args.get(param)
        if value:
            setattr(flt, attr, value)

    for param, (attr, cast) in NUMERIC_PARAMS.items():
        raw = args.get(param)
        if not raw:
            continue
        try:
            setattr(flt, attr, _parse_number(raw, cast))
        except ValueError:
            kind = 'an integer' if cast is int else 'a number'
            errors.append({'field': param, 'message': f'{param} must be {kind}'})

    is_verified = args.get('isVerified')
    if is_verified:
        flt.is_verified = is_verified == 'true'

    if args.get('amenities'):
        flt.amenities = _split_list(args['amenities'])
    if args.get('tags'):
        flt.tags = _split_list(args['tags'])

    if errors:
        raise ApiError.validation(errors, message='Invalid query parameters')

    return flt


def _escape_like(value: str) -> str:
    return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def delimited_token_match(column, token: str):
    """Case-insensitive match of ``token`` as a whole pipe-delimited item"""
    bounded = literal('|') + column + literal('|')
    return bounded.ilike(f'%|{_escape_like(token)}|%', escape='\\')


def property_predicates(flt: PropertyFilter) -> list:
    predicates = []

    for attr in EXACT_MATCH_PARAMS.values():
        value = getattr(flt, attr)
        if value is not None:
            predicates.append(getattr(Property, attr) == value)

    if flt.is_verified is not None:
        predicates.append(Property.is_verified == flt.is_verified)

    ranges = (
        (Property.price, flt.min_price, flt.max_price),
        (Property.bedrooms, flt.min_bedrooms, flt.max_bedrooms),
        (Property.bathrooms, flt.min_bathrooms, flt.max_bathrooms),
    )
    for column, low, high in ranges:
        if low is not None:
            predicates.append(column >= low)
        if high is not None:
            predicates.append(column <= high)

    if flt.min_rating is not None:
        predicates.append(Property.rating >= flt.min_rating)

    predicates.extend(delimited_token_match(Property.amenities, a) for a in flt.amenities)
    predicates.extend(delimited_token_match(Property.tags, t) for t in flt.tags)

    return predicates


def apply_property_filter(query, flt: PropertyFilter):
    predicates = property_predicates(flt)
    if predicates:
        query = query.filter(and_(*predicates))
    return query


def build_search_predicate(term: str):
    """Free-text match over the descriptive property columns"""
    pattern = f'%{_escape_like(term)}%'
    columns = (
        Property.title,
        Property.type,
        Property.state,
        Property.city,
        Property.amenities,
        Property.tags,
    )
    return or_(*(column.ilike(pattern, escape='\\') for column in columns))
