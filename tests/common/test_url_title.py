"""Tests for wishfill/common/url_title.py"""

from wishfill.common.url_title import title_from_url


class TestTitleFromUrl:
    def test_amazon_product(self, known_hosts):
        assert title_from_url("https://www.amazon.fr/dp/B08X6F1234", known_hosts) == "Produit Amazon"

    def test_amazon_short_link(self, known_hosts):
        assert title_from_url("https://amzn.eu/d/abc123", known_hosts) == "Produit Amazon"

    def test_subdomain_of_known_host(self, known_hosts):
        assert title_from_url("https://m.fnac.com/a123/xyz", known_hosts) == "Produit Fnac"

    def test_slug_becomes_title(self, known_hosts):
        url = "https://www.exemple.com/produit-super-cool-2024"
        assert title_from_url(url, known_hosts) == "Produit Super Cool 2024"

    def test_longest_segment_wins(self, known_hosts):
        url = "https://shop.example/fr/maison/lampe_arc_laiton.html"
        assert title_from_url(url, known_hosts) == "Lampe Arc Laiton"

    def test_percent_encoded_segment(self, known_hosts):
        url = "https://shop.example/tapis-berb%C3%A8re"
        assert title_from_url(url, known_hosts) == "Tapis Berbère"

    def test_long_slug_is_truncated(self, known_hosts):
        slug = "-".join(["canape"] * 20)
        title = title_from_url(f"https://shop.example/{slug}", known_hosts)
        assert title.endswith("...")
        assert len(title) <= 63

    def test_no_usable_segment_uses_domain(self, known_hosts):
        assert title_from_url("https://www.boutique.fr/p/12", known_hosts) == "Produit sur boutique.fr"

    def test_root_url_uses_domain(self, known_hosts):
        assert title_from_url("https://boutique.fr/", known_hosts) == "Produit sur boutique.fr"

    def test_deterministic(self, known_hosts):
        url = "https://www.exemple.com/produit-super-cool-2024"
        assert title_from_url(url, known_hosts) == title_from_url(url, known_hosts)

    def test_loads_known_hosts_from_config(self):
        assert title_from_url("https://www.amazon.fr/dp/B08X6F1234") == "Produit Amazon"
