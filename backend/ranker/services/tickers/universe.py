"""
Instrument Universe

Broker-style tickers grouped by asset class, plus the mapping to
Yahoo Finance symbols used for market data.
"""

SYMBOLS = {
    "forex": [
        # Majors (Yahoo: EURUSD=X)
        "EURUSD", "GBPUSD", "USDJPY", "USDCHF", "AUDUSD", "NZDUSD", "USDCAD",
        # Crosses
        "EURGBP", "EURJPY", "EURCHF", "EURAUD", "EURNZD", "EURCAD",
        "GBPJPY", "GBPCHF", "GBPAUD", "GBPNZD", "GBPCAD", "CHFJPY",
        "AUDJPY", "AUDCHF", "AUDNZD", "AUDCAD", "NZDJPY", "CADCHF",
        "CADJPY", "NZDCAD", "NZDCHF", "USDMXN", "EURMXN", "GBPMXN",
        "USDZAR", "EURZAR", "GBPZAR", "ZARJPY",
        # Exotics
        "EURHUF", "EURNOK", "EURPLN", "EURSEK", "EURTRY", "USDDKK",
        "USDCZK", "USDHUF", "USDNOK", "USDPLN", "USDSEK", "EURHKD",
        "USDSGD", "SGDJPY", "USDHKD", "USDCNH", "USDTRY",
    ],
    "crypto": [
        # Yahoo: BTC-USD
        "BTCUSD", "ETHUSD", "LTCUSD", "XRPUSD", "BCHUSD", "SOLUSD",
        "AAVEUSD", "ADAUSD", "ALGOUSD", "ATOMUSD", "AVAXUSD", "AXSUSD",
        "BNBUSD", "DASHUSD", "DOGEUSD", "DOTUSD", "FILUSD", "GRTUSD",
        "ICPUSD", "IOTAUSD", "LINKUSD", "LRCUSD", "MANAUSD", "NEARUSD",
    ],
    "etf": [
        # Yahoo: BRRR
        "BRRR.ETF", "IBIT.ETF", "FBTC.ETF", "ARKB.ETF", "BITB.ETF",
        "BTCO.ETF", "GBTC.ETF",
    ],
    "us_stocks": [
        # Yahoo: AAPL
        "AAPL.NAS", "ABBV.NYSE", "ABNB.NAS", "ABT.NYSE", "ACN.NYSE",
        "ADBE.NAS", "AMD.NAS", "AMZN.NAS", "AVGO.NAS", "AXP.NYSE",
        "BA.NYSE", "BABA.NYSE", "BAC.NYSE", "BKNG.NAS", "BLK.NYSE",
        "BMY.NYSE", "BX.NYSE", "CAT.NYSE", "CMCSA.NAS", "COP.NYSE",
        "COST.NAS", "CRM.NYSE", "CSCO.NAS", "CVS.NYSE", "CVX.NYSE",
        "DHR.NYSE", "DIS.NYSE", "GE.NYSE", "GOOGL.NAS", "GS.NYSE",
        "HD.NYSE", "HMC.NYSE", "HON.NAS", "IBM.NYSE", "INTC.NAS",
        "INTU.NAS", "ISRG.NAS", "JNJ.NYSE", "JPM.NYSE", "KO.NYSE",
        "LIN.NYSE", "LLY.NYSE", "LMT.NYSE", "MA.NYSE", "MCD.NYSE",
        "MDLZ.NAS", "META.NAS", "MMM.NYSE", "MRK.NYSE", "MS.NYSE",
        "MSFT.NAS", "NEE.NYSE", "NFLX.NAS", "NKE.NYSE", "NOW.NYSE",
        "NVDA.NAS", "ORCL.NYSE", "PEP.NAS", "PFE.NYSE", "PG.NYSE",
        "PM.NYSE", "PYPL.NAS", "QCOM.NAS", "RTX.NYSE", "SAP.NYSE",
        "SBUX.NAS", "SHOP.NYSE", "SONY.NYSE", "T.NYSE", "TMO.NYSE",
        "TMUS.NAS", "TSLA.NAS", "TXN.NAS", "UNH.NYSE", "UNP.NYSE",
        "UPS.NYSE", "V.NYSE", "VZ.NYSE", "WFC.NYSE", "WMT.NYSE",
        "XOM.NYSE",
    ],
    "japan_stocks": [
        "DAII.TSE", "DKI.TSE", "HIT.TSE", "MUR.TSE", "NID.TSE", "SVN.TSE",
        "TKY.TSE", "TM.TSE", "TMH.TSE", "OL.TSE", "KEE.TSE",
    ],
}

# Tokyo tickers trade on Yahoo under their numeric codes
JAPAN_YAHOO_CODES = {
    "DAII.TSE": "4658.T",
    "DKI.TSE": "6367.T",
    "HIT.TSE": "6501.T",
    "MUR.TSE": "6981.T",
    "NID.TSE": "6954.T",
    "KEE.TSE": "6861.T",
    "OL.TSE": "4661.T",
    "SVN.TSE": "3382.T",
    "TKY.TSE": "8035.T",
    "TM.TSE": "7203.T",
    "TMH.TSE": "8766.T",
}

# Ordering of asset classes in the ranking universe
UNIVERSE_ORDER = ["forex", "crypto", "etf", "us_stocks", "japan_stocks"]


def get_asset_class(ticker: str) -> str | None:
    """Get the asset class a ticker belongs to."""
    for asset_class, tickers in SYMBOLS.items():
        if ticker in tickers:
            return asset_class
    return None


def map_symbol(ticker: str) -> str:
    """
    Convert a broker ticker to its Yahoo Finance symbol.
    Unknown tickers are returned unchanged.
    """
    asset_class = get_asset_class(ticker)

    if asset_class == "etf":
        return ticker.removesuffix(".ETF")
    if asset_class == "japan_stocks":
        return JAPAN_YAHOO_CODES[ticker]
    if asset_class == "us_stocks":
        return ticker.rsplit(".", 1)[0]
    if asset_class == "crypto":
        return ticker.replace("USD", "-USD")
    if asset_class == "forex":
        return f"{ticker}=X"

    return ticker


def get_all_tickers() -> list[str]:
    """Get the full ranking universe, grouped by asset class."""
    tickers = []
    for asset_class in UNIVERSE_ORDER:
        tickers.extend(SYMBOLS[asset_class])
    return tickers
