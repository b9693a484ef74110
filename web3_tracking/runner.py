"""
Batch entry point — analyses a fixed list of dapps one after another
and prints the aggregate report.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Sequence

import dotenv

from web3_tracking import analyzer as analyzer_mod
from web3_tracking.models import analysis
from web3_tracking.utils import errors, logger, serialization

log = logger.create_logger("Runner")

DAPPS_TO_ANALYZE: tuple[str, ...] = (
    "https://app.uniswap.org",
    "https://balancer.fi/swap/ethereum/ETH",
    "https://pancakeswap.finance/",
    "https://swap.cow.fi/#/1/swap/WETH",
    "https://app.1inch.io/#/1/simple/swap/ETH",
    "https://moonwell.fi/discover",
    "https://app.morpho.org/",
    "https://app.sky.money/",
    "https://app.odos.xyz/",
    "https://curve.fi/#/ethereum/swap",
    "https://www.jito.network/",
    "https://holdstation.exchange/trading?p=BTCUSD",
    "https://app.camelot.exchange/",
    "https://sun.io/?lang=en-US#/v3/swap?type=swap",
    "https://pump.fun/board",
    "https://trade-signal.net/",
    "https://quickswap.exchange/#/swap?currency0=ETH&currency1=0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619&swapIndex=0",
    "https://app.across.to/bridge?",
    "https://app.ethena.fi/buy",
    "https://app.paraswap.xyz/#/swap/",
    "https://www.sushi.com/ethereum/swap",
    "https://jumper.exchange/",
    "https://app.pendle.finance/trade/markets",
    "https://app.kanalabs.io/",
    "https://lfj.gg/avalanche/trade",
    "https://woofi.com/",
    "https://app.bemo.fi/",
    "https://stargate.finance/",
    "https://app.lynex.fi/",
    "https://meson.fi/",
)


async def run_analysis(
    urls: Sequence[str] = DAPPS_TO_ANALYZE,
    analyzer: analyzer_mod.Web3TrackingAnalyzer | None = None,
) -> analysis.AggregateReport:
    """Analyse *urls* strictly in order, then print and return the report."""
    analyzer = analyzer or analyzer_mod.Web3TrackingAnalyzer()
    log.section(f"Analyzing {len(urls)} sites")

    for url in urls:
        await analyzer.analyze(url)

    report = analyzer.generate_report()
    print("Analysis Complete!")
    print(serialization.to_json(report))
    return report


def main() -> None:
    """Run the batch analysis, exiting non-zero on an unhandled error."""
    dotenv.load_dotenv()
    try:
        logger.start_log_file("batch")
        asyncio.run(run_analysis())
    except Exception as error:
        log.error("Analysis run failed", {"error": errors.get_error_message(error)})
        sys.exit(1)
    finally:
        logger.end_log_file()
