"""
HTML Template for the Jewelry Catalog API test interface
"""

HTML_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Jewelry Catalog API - Test Interface</title>
    <style>
        * {
            margin: 0;
            padding: 0;
            box-sizing: border-box;
        }

        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif;
            background: linear-gradient(135deg, #2d2416 0%, #8a6d3b 100%);
            min-height: 100vh;
            padding: 20px;
        }

        .container {
            max-width: 1400px;
            margin: 0 auto;
        }

        .card {
            background: white;
            border-radius: 16px;
            padding: 24px;
            margin-bottom: 24px;
            box-shadow: 0 10px 40px rgba(0, 0, 0, 0.15);
        }

        h1 {
            color: #2d3748;
            margin-bottom: 8px;
        }

        h2 {
            color: #2d3748;
            font-size: 1.2em;
            margin-bottom: 16px;
        }

        .subtitle {
            color: #718096;
        }

        .rates {
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(200px, 1fr));
            gap: 16px;
            margin-bottom: 12px;
        }

        .rate {
            background: #fdf8ee;
            border: 1px solid #e9d8a6;
            border-radius: 12px;
            padding: 16px;
        }

        .rate-label {
            color: #8a6d3b;
            font-size: 0.85em;
            text-transform: uppercase;
        }

        .rate-value {
            color: #2d3748;
            font-size: 1.6em;
            font-weight: 700;
        }

        .meta {
            color: #718096;
            font-size: 0.85em;
        }

        .controls {
            display: flex;
            flex-wrap: wrap;
            gap: 12px;
            margin-bottom: 16px;
        }

        input, select {
            padding: 8px 12px;
            border: 1px solid #cbd5e0;
            border-radius: 8px;
        }

        .btn {
            padding: 8px 16px;
            border: none;
            border-radius: 8px;
            cursor: pointer;
            font-weight: 600;
            background: #8a6d3b;
            color: white;
        }

        .btn:disabled {
            opacity: 0.6;
            cursor: not-allowed;
        }

        .products {
            display: grid;
            grid-template-columns: repeat(auto-fill, minmax(220px, 1fr));
            gap: 16px;
        }

        .product {
            border: 1px solid #e2e8f0;
            border-radius: 12px;
            padding: 12px;
        }

        .product img {
            width: 100%;
            height: 160px;
            object-fit: cover;
            border-radius: 8px;
            background: #f7fafc;
        }

        .product-name {
            font-weight: 600;
            margin-top: 8px;
        }

        .product-price {
            color: #8a6d3b;
            font-weight: 700;
        }

        pre {
            background: #1a202c;
            color: #e2e8f0;
            padding: 12px;
            border-radius: 8px;
            overflow: auto;
            max-height: 300px;
            font-size: 0.8em;
        }
    </style>
</head>
<body>
    <div class="container">
        <div class="card">
            <h1>Jewelry Catalog API</h1>
            <p class="subtitle">Local test interface for the catalog and live rates endpoints</p>
        </div>

        <div class="card">
            <h2>Live Rates (per 10 grams)</h2>
            <div class="rates">
                <div class="rate">
                    <div class="rate-label">Gold 24K</div>
                    <div class="rate-value" id="gold_24k">-</div>
                </div>
                <div class="rate">
                    <div class="rate-label">Gold 22K</div>
                    <div class="rate-value" id="gold_22k">-</div>
                </div>
                <div class="rate">
                    <div class="rate-label">Silver</div>
                    <div class="rate-value" id="silver">-</div>
                </div>
            </div>
            <p class="meta" id="rates-meta">Not loaded</p>
            <div class="controls" style="margin-top: 12px;">
                <button class="btn" id="btn-rates" onclick="loadRates(false)">Fetch Rates</button>
                <button class="btn" id="btn-refresh" onclick="loadRates(true)">Force Refresh</button>
            </div>
        </div>

        <div class="card">
            <h2>Products</h2>
            <div class="controls">
                <select id="category">
                    <option value="">All categories</option>
                </select>
                <select id="collection">
                    <option value="">All products</option>
                    <option value="new-arrivals">New arrivals</option>
                    <option value="trending">Trending</option>
                    <option value="exclusive">Exclusive</option>
                </select>
                <input id="search" placeholder="Search">
                <input id="minPrice" type="number" placeholder="Min price">
                <input id="maxPrice" type="number" placeholder="Max price">
                <select id="sort">
                    <option value="default">Default order</option>
                    <option value="price-low">Price: low to high</option>
                    <option value="price-high">Price: high to low</option>
                    <option value="name-asc">Name: A-Z</option>
                    <option value="name-desc">Name: Z-A</option>
                </select>
                <button class="btn" onclick="loadProducts()">Apply</button>
            </div>
            <div class="products" id="products"></div>
        </div>

        <div class="card">
            <h2>Last Response</h2>
            <pre id="response">{}</pre>
        </div>
    </div>

    <script>
        function showResponse(data) {
            document.getElementById('response').textContent = JSON.stringify(data, null, 2);
        }

        async function loadRates(refresh) {
            const btn = document.getElementById(refresh ? 'btn-refresh' : 'btn-rates');
            btn.disabled = true;
            try {
                const response = await fetch(refresh ? '/api/rates/refresh' : '/api/rates');
                const data = await response.json();
                showResponse(data);
                for (const key of ['gold_24k', 'gold_22k', 'silver']) {
                    document.getElementById(key).textContent = data[key];
                }
                const cached = data.isCached ? `cached, ${data.cacheAge} min old` : 'fresh';
                document.getElementById('rates-meta').textContent = `Updated ${data.lastUpdated} (${cached})`;
            } catch (error) {
                showResponse({ error: error.message });
            } finally {
                btn.disabled = false;
            }
        }

        async function loadCategories() {
            const response = await fetch('/api/categories');
            if (!response.ok) {
                showResponse(await response.json());
                return;
            }
            const select = document.getElementById('category');
            for (const category of await response.json()) {
                const option = document.createElement('option');
                option.value = category.slug;
                option.textContent = category.name;
                select.appendChild(option);
            }
        }

        async function loadProducts() {
            const params = new URLSearchParams();
            for (const key of ['category', 'collection', 'search', 'minPrice', 'maxPrice', 'sort']) {
                const value = document.getElementById(key).value;
                if (value) {
                    params.append(key, value);
                }
            }
            const response = await fetch(`/api/products?${params}`);
            const data = await response.json();
            showResponse(data);

            const container = document.getElementById('products');
            container.innerHTML = '';
            if (!response.ok) {
                return;
            }
            for (const product of data) {
                const card = document.createElement('div');
                card.className = 'product';
                const img = document.createElement('img');
                img.src = product.imageUrl || '';
                img.alt = product.name;
                const name = document.createElement('div');
                name.className = 'product-name';
                name.textContent = product.name;
                const price = document.createElement('div');
                price.className = 'product-price';
                price.textContent = `₹ ${Number(product.price || 0).toLocaleString('en-IN')}`;
                const meta = document.createElement('div');
                meta.className = 'meta';
                meta.textContent = [product.category, product.purity, product.weight].filter(Boolean).join(' · ');
                card.append(img, name, price, meta);
                container.appendChild(card);
            }
        }

        loadRates(false);
        loadCategories().then(loadProducts);
    </script>
</body>
</html>
"""
