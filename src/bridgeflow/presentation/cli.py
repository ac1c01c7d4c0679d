import asyncio, logging, os
from typing import Optional

import httpx
import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.rpc_httpx import HttpxLogSource
from ..application.use_cases import scan_to_parquet
from ..config import BridgeConfig, load_rpc_endpoints, rpc_env_var
from ..domain.decoding import decode_route_text, hex_to_bytes, parse_destination_chain_id
from ..domain.errors import BridgeFlowError

app = typer.Typer(help="bridgeflow: BridgeExecuted inflow/outflow scanner.")
console = Console()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


@app.command()
def scan(
    network: str,
    start_block: int,
    end_block: str = typer.Argument(..., help="Block number or 'latest'"),
    out: str = typer.Option("", help="Parquet output path (default: transfers/<network>_<from>_<to>.parquet)"),
    direction: Optional[str] = typer.Option(None, help="inflow | outflow (default: from the network)"),
    manifest_dir: str = typer.Option("manifests", help="Directory for per-run JSONL manifests; '' disables"),
    timeout_s: int = 20,
    log_level: str = typer.Option("INFO", "--log-level"),
):
    """Scan NETWORK between START_BLOCK and END_BLOCK and write classified transfers to Parquet."""
    _configure_logging(log_level)
    load_dotenv()
    cfg = BridgeConfig()
    if direction not in (None, "inflow", "outflow"):
        raise typer.BadParameter(f"direction must be inflow or outflow, got {direction!r}")
    endpoints = load_rpc_endpoints((network,))
    if network not in endpoints:
        raise typer.BadParameter(f"set {rpc_env_var(network)} to the RPC url of {network!r}")
    out_path = out or os.path.join("transfers", f"{network}_{start_block}_{end_block}.parquet")

    async def main() -> dict[str, int]:
        async with HttpxLogSource(endpoints, timeout_s=timeout_s) as source:
            return await scan_to_parquet(
                source=source, network=network,
                start_block=start_block, end_block=end_block,
                out_path=out_path, config=cfg,
                direction=direction,  # type: ignore[arg-type]
                manifest_dir=manifest_dir or None,
            )

    try:
        res = asyncio.run(main())
    except (BridgeFlowError, httpx.HTTPError, ValueError) as e:
        console.print(f"[bold red]error[/]: {e}")
        raise typer.Exit(code=1)
    console.print(
        f"[bold]done[/]: {network} [{res['from_block']:,}, {res['to_block']:,}] • "
        f"{res['logs']} logs • [green]{res['records']}[/] transfers → {out_path}"
    )


@app.command()
def networks():
    """List configured networks, their chunk sizes and scan direction."""
    load_dotenv()
    cfg = BridgeConfig()
    endpoints = load_rpc_endpoints(cfg.networks)
    table = Table(title=f"contract {cfg.contract} • target chain id {cfg.target_chain_id}")
    table.add_column("network"); table.add_column("chunk", justify="right")
    table.add_column("direction"); table.add_column("rpc")
    for n in cfg.networks:
        table.add_row(n, f"{cfg.chunk_size_for(n):,}", cfg.direction_for(n),
                      "[green]set[/]" if n in endpoints else f"[red]{rpc_env_var(n)}[/]")
    console.print(table)


@app.command()
def route(ext_data: str):
    """Print the destination chain id encoded in a hex extData payload."""
    try:
        payload = hex_to_bytes(ext_data)
    except ValueError:
        raise typer.BadParameter(f"not a hex string: {ext_data!r}")
    text = decode_route_text(payload)
    dest = parse_destination_chain_id(text) if text is not None else None
    console.print(f"text={text!r}  destination={dest if dest is not None else 'unknown'}")


if __name__ == "__main__":
    app()
