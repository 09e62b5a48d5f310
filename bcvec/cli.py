import typer
from pathlib import Path
from typing_extensions import Annotated
from typing import Optional, List

from bcvec.commands import (
    clear_cache,
    find_nearby_stations,
    generate_alpine_report,
    generate_station_map,
)

app = typer.Typer(
    name="bcvec",
    help="CLI tools for weather station, catchment and BEC zone vector analysis",
    add_completion=False,
)

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", help="YAML configuration file (defaults to config/default.yaml).", exists=True, readable=True, resolve_path=True),
]
CacheDirOption = Annotated[
    Optional[Path],
    typer.Option(help="Cache folder (defaults to the configured cache.dir).", file_okay=False, dir_okay=True, resolve_path=True),
]
NoCacheOption = Annotated[bool, typer.Option("--no-cache", help="Skip reading and writing the local cache.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")]


@app.command()
def stations(
    stations_csv: Annotated[
        Path,
        typer.Option(
            ..., # Required
            help="Path to the station inventory CSV.",
            exists=True, readable=True, resolve_path=True
        )
    ],
    output_path: Annotated[
        Path,
        typer.Option(help="Path to save the station points (GeoJSON).", writable=True, resolve_path=True)
    ] = Path("outputs/stations.geojson"),
    boundary_path: Annotated[
        Optional[Path],
        typer.Option(help="Optional boundary polygons; only stations inside are kept.", exists=True, readable=True, resolve_path=True)
    ] = None,
    summary_path: Annotated[
        Optional[Path],
        typer.Option(help="Optional CSV of station counts per record length class.", writable=True, resolve_path=True)
    ] = None,
    province: Annotated[
        Optional[str],
        typer.Option(help="Province to keep (defaults to the configured province).")
    ] = None,
    frequency: Annotated[
        str,
        typer.Option(help="Record frequency summarised in the class counts: hly, dly or mly.")
    ] = "hly",
    config_path: ConfigOption = None,
    cache_dir: CacheDirOption = None,
    no_cache: NoCacheOption = False,
    verbose: VerboseOption = False,
) -> None:
    """
    Prepares the weather station map layer with record length classes.
    """
    generate_station_map(
        stations_csv=stations_csv,
        output_path=output_path,
        boundary_path=boundary_path,
        summary_path=summary_path,
        province=province,
        frequency=frequency,
        config_path=config_path,
        cache_dir=cache_dir,
        use_cache=not no_cache,
        verbose=verbose,
    )


@app.command()
def nearby(
    stations_csv: Annotated[
        Path,
        typer.Option(..., help="Path to the station inventory CSV.", exists=True, readable=True, resolve_path=True)
    ],
    catchments_path: Annotated[
        Path,
        typer.Option(..., help="Catchment polygon file or geodatabase.", exists=True, resolve_path=True)
    ],
    station_id: Annotated[
        Optional[str],
        typer.Option(help="Gauging station identifying the catchment (all catchments when omitted).")
    ] = None,
    layers: Annotated[
        Optional[List[str]],
        typer.Option("--layer", help="Geodatabase layer holding catchments. Repeat for several layers.")
    ] = None,
    distance: Annotated[
        Optional[float],
        typer.Option(help="Buffer distance in metres (defaults to the configured distance).", min=0)
    ] = None,
    output_dir: Annotated[
        Path,
        typer.Option(help="Folder for the buffer and station GeoJSON files.", file_okay=False, dir_okay=True, resolve_path=True)
    ] = Path("outputs/nearby"),
    config_path: ConfigOption = None,
    cache_dir: CacheDirOption = None,
    no_cache: NoCacheOption = False,
    verbose: VerboseOption = False,
) -> None:
    """
    Finds the weather stations within a buffer around a catchment.
    """
    find_nearby_stations(
        stations_csv=stations_csv,
        catchments_path=catchments_path,
        station_id=station_id,
        layers=layers,
        distance=distance,
        output_dir=output_dir,
        config_path=config_path,
        cache_dir=cache_dir,
        use_cache=not no_cache,
        verbose=verbose,
    )


@app.command()
def alpine(
    catchments_path: Annotated[
        Path,
        typer.Option(..., help="Catchment polygon file or geodatabase.", exists=True, resolve_path=True)
    ],
    layers: Annotated[
        Optional[List[str]],
        typer.Option("--layer", help="Geodatabase layer holding catchments. Repeat for several layers.")
    ] = None,
    zones_path: Annotated[
        Optional[Path],
        typer.Option(help="Local BEC zone polygons (downloaded from the provincial WFS when omitted).", exists=True, readable=True, resolve_path=True)
    ] = None,
    output_path: Annotated[
        Path,
        typer.Option(help="Path to save the coverage table (CSV).", writable=True, resolve_path=True)
    ] = Path("outputs/alpine_coverage.csv"),
    intersections_path: Annotated[
        Optional[Path],
        typer.Option(help="Optional path to save the alpine intersections (GeoJSON).", writable=True, resolve_path=True)
    ] = None,
    use_catchment_area: Annotated[
        bool,
        typer.Option("--use-catchment-area", help="Use the published catchment area rather than the polygon area.")
    ] = False,
    config_path: ConfigOption = None,
    cache_dir: CacheDirOption = None,
    no_cache: NoCacheOption = False,
    verbose: VerboseOption = False,
) -> None:
    """
    Reports the percentage of each catchment covered by alpine BEC zones.
    """
    generate_alpine_report(
        catchments_path=catchments_path,
        layers=layers,
        zones_path=zones_path,
        output_path=output_path,
        intersections_path=intersections_path,
        use_catchment_area=use_catchment_area,
        config_path=config_path,
        cache_dir=cache_dir,
        use_cache=not no_cache,
        verbose=verbose,
    )


@app.command("clear-cache")
def clear_cache_command(
    key: Annotated[
        Optional[str],
        typer.Option(help="Cache entry to remove (all entries when omitted).")
    ] = None,
    config_path: ConfigOption = None,
    cache_dir: CacheDirOption = None,
    verbose: VerboseOption = False,
) -> None:
    """
    Removes cached sources so the next run reloads them.
    """
    clear_cache(key=key, config_path=config_path, cache_dir=cache_dir, verbose=verbose)


if __name__ == "__main__":
    app()
