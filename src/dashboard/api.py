"""
Web API and page for the trading dashboard.
"""

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from src.dashboard.config import DashboardConfig
from src.dashboard.synchronizer import StateSynchronizer
from src.dashboard.view import build_view
from src.metrics.calculations import summarize

router = APIRouter()


def create_app(synchronizer: StateSynchronizer, config: DashboardConfig) -> FastAPI:
    """
    Build the dashboard app around a synchronizer.

    Args:
        synchronizer: Synchronizer whose store the routes read and which
            the refresh route triggers
        config: Dashboard configuration (formatting, refresh interval)
    """
    app = FastAPI(title="TradeForge Dashboard", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.synchronizer = synchronizer
    app.state.config = config
    app.include_router(router)
    return app


def _status(synchronizer: StateSynchronizer, config: DashboardConfig) -> dict:
    snapshot = synchronizer.store.current
    return {
        "loaded": synchronizer.store.is_loaded,
        "apiConnected": snapshot.api_connected,
        "lastUpdate": snapshot.last_update.isoformat(),
        "nextUpdate": synchronizer.next_refresh_time().isoformat(),
        "refreshIntervalSeconds": config.refresh_interval_seconds,
        "running": synchronizer.scheduler.is_running,
        "jobs": synchronizer.scheduler.get_jobs() if synchronizer.scheduler.is_running else [],
    }


@router.get("/")
async def dashboard(request: Request):
    """Serve the dashboard HTML."""
    interval_ms = request.app.state.config.refresh_interval_seconds * 1000
    return HTMLResponse(content=DASHBOARD_HTML.replace("__REFRESH_MS__", str(interval_ms)))


@router.get("/api/status")
async def get_status(request: Request) -> dict:
    """Connectivity and refresh timing."""
    return _status(request.app.state.synchronizer, request.app.state.config)


@router.get("/api/snapshot")
async def get_snapshot(request: Request) -> dict:
    """Current snapshot as camelCase JSON."""
    return request.app.state.synchronizer.store.current.to_dict()


@router.get("/api/metrics")
async def get_metrics(request: Request) -> dict:
    """Stat-card figures for the current snapshot."""
    config: DashboardConfig = request.app.state.config
    snapshot = request.app.state.synchronizer.store.current
    return summarize(snapshot, currency=config.currency, locale=config.currency_locale).to_dict()


@router.get("/api/view")
async def get_view(request: Request) -> dict:
    """Render-ready table rows and chart series."""
    config: DashboardConfig = request.app.state.config
    snapshot = request.app.state.synchronizer.store.current
    return build_view(snapshot, currency=config.currency, locale=config.currency_locale)


@router.post("/api/refresh")
async def refresh(request: Request) -> dict:
    """Synchronize now (manual refresh button)."""
    synchronizer: StateSynchronizer = request.app.state.synchronizer
    await synchronizer.synchronize()
    return _status(synchronizer, request.app.state.config)


DASHBOARD_HTML = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>TradeForge Dashboard</title>
    <style>
        * { box-sizing: border-box; margin: 0; padding: 0; }
        :root {
            --bg-canvas: #0f172a;
            --bg-card: #1e293b;
            --text-primary: #f1f5f9;
            --text-secondary: #94a3b8;
            --text-muted: #64748b;
            --success: #10b981;
            --danger: #ef4444;
            --border: #334155;
        }
        body {
            font-family: system-ui, sans-serif;
            background: var(--bg-canvas);
            color: var(--text-primary);
            line-height: 1.5;
        }
        .header {
            display: flex;
            justify-content: space-between;
            align-items: center;
            padding: 16px 32px;
            border-bottom: 1px solid var(--border);
        }
        .status { display: flex; align-items: center; gap: 12px; color: var(--text-secondary); }
        .status-dot { width: 10px; height: 10px; border-radius: 50%; background: var(--danger); }
        .status-dot.ok { background: var(--success); }
        button {
            background: transparent;
            border: 1px solid var(--border);
            color: var(--text-secondary);
            padding: 4px 10px;
            border-radius: 6px;
            cursor: pointer;
        }
        .content { padding: 32px; display: flex; flex-direction: column; gap: 24px; }
        .stats-grid { display: grid; grid-template-columns: repeat(4, 1fr); gap: 16px; }
        .card { background: var(--bg-card); border-radius: 8px; padding: 16px; }
        .card h2 { font-size: 14px; color: var(--text-secondary); margin-bottom: 8px; }
        .stat-value { font-size: 24px; font-weight: 600; }
        .stat-change { font-size: 13px; color: var(--text-muted); }
        .positive { color: var(--success); }
        .negative { color: var(--danger); }
        .grid { display: grid; grid-template-columns: 2fr 1fr; gap: 24px; }
        table { width: 100%; border-collapse: collapse; font-size: 13px; }
        td, th { padding: 6px 4px; text-align: left; border-bottom: 1px solid var(--border); }
        .empty-state { color: var(--text-muted); padding: 16px 0; }
        .footer { color: var(--text-muted); font-size: 12px; text-align: center; }
        #loading { padding: 64px; text-align: center; }
        svg.chart { width: 100%; height: 250px; }
        svg.chart polyline { fill: none; stroke: var(--success); stroke-width: 2; }
    </style>
</head>
<body>
    <div class="header">
        <h1>TradeForge Dashboard</h1>
        <div class="status">
            <span id="status-dot" class="status-dot"></span>
            <span id="status-text">Disconnected</span>
            <span id="last-update"></span>
            <button onclick="manualRefresh()">Refresh</button>
        </div>
    </div>
    <div id="loading">Loading TradeForge...</div>
    <div class="content" id="content" style="display: none;">
        <div class="stats-grid">
            <div class="card">
                <h2>Portfolio Value</h2>
                <div class="stat-value" id="portfolio-value"></div>
                <div class="stat-change" id="day-change"></div>
            </div>
            <div class="card">
                <h2>Open Positions</h2>
                <div class="stat-value" id="open-positions"></div>
                <div class="stat-change" id="profitable-positions"></div>
            </div>
            <div class="card">
                <h2>Today's Trades</h2>
                <div class="stat-value" id="trades-today"></div>
                <div class="stat-change" id="closed-today"></div>
            </div>
            <div class="card">
                <h2>Win Rate Today</h2>
                <div class="stat-value positive" id="win-rate"></div>
                <div class="stat-change" id="wins"></div>
            </div>
        </div>
        <div class="grid">
            <div style="display: flex; flex-direction: column; gap: 24px;">
                <div class="card" id="performance-card">
                    <h2>Portfolio Performance (Today)</h2>
                    <div id="performance-chart"></div>
                </div>
                <div class="card">
                    <h2>Open Positions</h2>
                    <div id="positions"></div>
                </div>
            </div>
            <div style="display: flex; flex-direction: column; gap: 24px;">
                <div class="card" id="watchlist-card">
                    <h2>Watchlist</h2>
                    <div id="watchlist"></div>
                </div>
                <div class="card" id="strategies-card">
                    <h2>Strategy Stats</h2>
                    <div id="strategies"></div>
                </div>
                <div class="card">
                    <h2>Today's Activity</h2>
                    <div id="trades"></div>
                </div>
            </div>
        </div>
        <div class="footer" id="footer"></div>
    </div>

    <script>
        const REFRESH_MS = __REFRESH_MS__;

        function cls(positive) {
            return positive ? 'positive' : 'negative';
        }

        function chartSvg(chart) {
            const values = chart.values;
            if (!values || values.length < 2) return '';
            const width = 600, height = 250;
            const [min, max] = chart.domain;
            const range = max - min || 1;
            const points = values.map((v, i) => {
                const x = (i / (values.length - 1)) * width;
                const y = height - ((v - min) / range) * height;
                return `${x.toFixed(1)},${y.toFixed(1)}`;
            }).join(' ');
            return `<svg class="chart" viewBox="0 0 ${width} ${height}" preserveAspectRatio="none"><polyline points="${points}"/></svg>`;
        }

        function renderTable(rows, headers, cells) {
            const head = headers.map(h => `<th>${h}</th>`).join('');
            const body = rows.map(r => `<tr>${cells(r)}</tr>`).join('');
            return `<table><thead><tr>${head}</tr></thead><tbody>${body}</tbody></table>`;
        }

        async function fetchData() {
            try {
                const [status, metrics, view] = await Promise.all([
                    fetch('api/status').then(r => r.json()),
                    fetch('api/metrics').then(r => r.json()),
                    fetch('api/view').then(r => r.json()),
                ]);
                if (!status.loaded) return;

                document.getElementById('loading').style.display = 'none';
                document.getElementById('content').style.display = 'flex';

                document.getElementById('status-dot').className = 'status-dot' + (status.apiConnected ? ' ok' : '');
                document.getElementById('status-text').textContent = status.apiConnected ? 'Agent Connected' : 'Disconnected';
                document.getElementById('last-update').textContent =
                    'Last update: ' + new Date(status.lastUpdate).toLocaleTimeString();

                const valueEl = document.getElementById('portfolio-value');
                valueEl.textContent = metrics.portfolio_value;
                valueEl.className = 'stat-value ' + cls(metrics.day_change_positive);
                const changeEl = document.getElementById('day-change');
                changeEl.textContent = `${metrics.day_change} (${metrics.day_change_percent})`;
                changeEl.className = 'stat-change ' + cls(metrics.day_change_positive);
                document.getElementById('open-positions').textContent = metrics.open_positions;
                document.getElementById('profitable-positions').textContent = `${metrics.profitable_positions} in profit`;
                document.getElementById('trades-today').textContent = metrics.trades_today;
                document.getElementById('closed-today').textContent = `${metrics.closed_today} closed`;
                document.getElementById('win-rate').textContent = `${metrics.win_rate_today}%`;
                document.getElementById('wins').textContent = `${metrics.winning_trades} / ${metrics.closed_trades} wins`;

                document.getElementById('performance-card').style.display = view.chart.values.length ? '' : 'none';
                document.getElementById('performance-chart').innerHTML = chartSvg(view.chart);

                document.getElementById('positions').innerHTML = view.positions.length
                    ? renderTable(view.positions, ['', 'Ticker', 'Entry', 'Current', 'P&L'], p =>
                        `<td>${p.side}</td><td><b>${p.ticker}</b><br><small>${p.strategy} • ${p.leverage} • Conf: ${p.confidence}</small></td>` +
                        `<td>${p.entry}</td><td>${p.current}</td><td class="${cls(p.positive)}">${p.pnl}</td>`)
                    : '<div class="empty-state">No open positions</div>';

                document.getElementById('watchlist-card').style.display = view.watchlist.length ? '' : 'none';
                document.getElementById('watchlist').innerHTML = renderTable(view.watchlist, ['Ticker', 'Price', 'Change'], w =>
                    `<td><b>${w.ticker}</b></td><td>${w.price}</td><td class="${cls(w.positive)}">${w.change}</td>`);

                document.getElementById('strategies-card').style.display = view.strategies.length ? '' : 'none';
                document.getElementById('strategies').innerHTML = renderTable(view.strategies, ['Strategy', 'Win Rate'], s =>
                    `<td><b>${s.name}</b><br><small>${s.detail}</small></td><td class="${cls(s.winRatePositive)}">${s.winRate}</td>`);

                document.getElementById('trades').innerHTML = view.trades.length
                    ? renderTable(view.trades, ['Ticker', 'Type', 'Price', 'P&L'], t =>
                        `<td><b>${t.ticker}</b></td><td>${t.type}</td><td>${t.price}</td>` +
                        `<td class="${t.open ? '' : cls(t.positive)}">${t.pnl}</td>`)
                    : '<div class="empty-state">No trades today</div>';

                document.getElementById('footer').textContent =
                    `Dashboard refreshes every ${status.refreshIntervalSeconds} seconds • Next update: ` +
                    new Date(status.nextUpdate).toLocaleTimeString();
            } catch (e) {
                console.error('Dashboard fetch error:', e);
            }
        }

        async function manualRefresh() {
            try {
                await fetch('api/refresh', { method: 'POST' });
            } catch (e) {
                console.error('Refresh error:', e);
            }
            await fetchData();
        }

        fetchData();
        setInterval(fetchData, REFRESH_MS);
    </script>
</body>
</html>
"""
