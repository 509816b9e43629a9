import unittest

from cli_tools.nproxy import RawCertificate, RawProxyHost, certificate_list, proxy_host_list


def _raw_host(**overrides) -> dict:
    data = {
        "id": 1,
        "domain_names": ["example.com", "www.example.com"],
        "forward_scheme": "https",
        "forward_host": "backend",
        "forward_port": 8080,
        "certificate_id": 5,
        "ssl_forced": True,
        "http2_support": True,
        "block_exploits": True,
        "caching_enabled": False,
        "allow_websocket_upgrade": True,
        "access_list_id": 0,
        "advanced_config": "proxy_set_header X-Test 1;",
        "enabled": True,
        "meta": {"letsencrypt_agree": False},
    }
    data.update(overrides)
    return data


def _raw_cert(**overrides) -> dict:
    data = {
        "id": 3,
        "provider": "letsencrypt",
        "nice_name": "example.com",
        "domain_names": ["example.com"],
        "expires_on": "2024-12-31 00:00:00",
        "meta": {},
    }
    data.update(overrides)
    return data


class ProxyHostNormalizationTests(unittest.TestCase):
    def test_list_item(self):
        item = RawProxyHost.from_api(_raw_host()).to_list_item().to_dict()

        self.assertEqual(
            item,
            {
                "id": 1,
                "domainNames": ["example.com", "www.example.com"],
                "forwardHost": "backend",
                "forwardPort": 8080,
                "sslForced": True,
                "enabled": True,
            },
        )

    def test_detail_with_all_fields(self):
        host = RawProxyHost.from_api(_raw_host()).to_proxy_host().to_dict()

        self.assertEqual(host["forwardScheme"], "https")
        self.assertEqual(host["certificateId"], 5)
        self.assertTrue(host["blockExploits"])
        self.assertFalse(host["cachingEnabled"])
        self.assertTrue(host["websocket"])
        self.assertEqual(host["advancedConfig"], "proxy_set_header X-Test 1;")
        self.assertNotIn("http2_support", host)
        self.assertNotIn("meta", host)

    def test_detail_omits_unset_certificate_and_empty_config(self):
        for cert_id in (None, 0):
            host = RawProxyHost.from_api(_raw_host(certificate_id=cert_id, advanced_config="")).to_proxy_host()
            out = host.to_dict()
            self.assertNotIn("certificateId", out)
            self.assertNotIn("advancedConfig", out)

    def test_defaults_for_absent_optional_fields(self):
        data = _raw_host()
        del data["advanced_config"]
        del data["allow_websocket_upgrade"]
        host = RawProxyHost.from_api(data).to_proxy_host()

        self.assertEqual(host.advanced_config, "")
        self.assertFalse(host.websocket)

    def test_list_item_fields_are_subset_of_detail(self):
        raw = RawProxyHost.from_api(_raw_host())
        self.assertTrue(set(raw.to_list_item().to_dict()) < set(raw.to_proxy_host().to_dict()))

    def test_missing_forward_host_raises(self):
        data = _raw_host()
        del data["forward_host"]
        with self.assertRaises(KeyError):
            RawProxyHost.from_api(data)

    def test_host_list_wrapper(self):
        payload = proxy_host_list([RawProxyHost.from_api(_raw_host())])
        self.assertEqual(list(payload), ["hosts"])
        self.assertEqual(payload["hosts"][0]["id"], 1)

    def test_null_strings_read_as_empty(self):
        host = RawProxyHost.from_api(_raw_host(forward_scheme=None, forward_host=None)).to_proxy_host()
        self.assertEqual((host.forward_scheme, host.forward_host), ("", ""))


class CertificateNormalizationTests(unittest.TestCase):
    def test_list_item(self):
        item = RawCertificate.from_api(_raw_cert()).to_list_item().to_dict()

        self.assertEqual(
            item,
            {
                "id": 3,
                "niceName": "example.com",
                "provider": "letsencrypt",
                "expiresOn": "2024-12-31 00:00:00",
            },
        )

    def test_detail(self):
        cert = RawCertificate.from_api(_raw_cert()).to_certificate().to_dict()

        self.assertEqual(list(cert), ["id", "provider", "niceName", "domainNames", "expiresOn"])
        self.assertEqual(cert["domainNames"], ["example.com"])

    def test_missing_domain_names_default_to_empty(self):
        data = _raw_cert()
        del data["domain_names"]
        self.assertEqual(RawCertificate.from_api(data).to_certificate().domain_names, ())

    def test_list_item_fields_are_subset_of_detail(self):
        raw = RawCertificate.from_api(_raw_cert())
        self.assertTrue(set(raw.to_list_item().to_dict()) < set(raw.to_certificate().to_dict()))

    def test_null_provider_reads_as_empty(self):
        self.assertEqual(RawCertificate.from_api(_raw_cert(provider=None)).provider, "")

    def test_certificate_list_wrapper(self):
        payload = certificate_list([RawCertificate.from_api(_raw_cert()), RawCertificate.from_api(_raw_cert(id=4))])
        self.assertEqual([c["id"] for c in payload["certificates"]], [3, 4])


if __name__ == "__main__":
    unittest.main()
