from typing import List, Union


def season_code(start_year: int) -> str:
    """Encodes the season starting in ``start_year``, e.g. 2015 -> "20152016"."""
    return f"{start_year}{start_year + 1}"


def seasons_in_range(start_year: int, end_year: int) -> List[str]:
    """One season code per start year, both ends inclusive."""
    if start_year > end_year:
        raise ValueError(f"Invalid season range: {start_year} > {end_year}")
    return [season_code(year) for year in range(start_year, end_year + 1)]


def season_start_year(code: Union[int, str]) -> int:
    """20152016 -> 2015."""
    return int(code) // 10000


def season_in_range(code: Union[int, str], start_year: int, end_year: int) -> bool:
    return start_year <= season_start_year(code) <= end_year
