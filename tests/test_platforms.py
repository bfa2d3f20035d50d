import pytest

import coversnap
from coversnap.platforms import detect_platform, detect_platform_from_html, promote_platform

P = coversnap.Platform


@pytest.mark.unit
class Describe_detect_platform:
    @pytest.mark.parametrize("url,expected", [
        ("https://mp.weixin.qq.com/s/AbC", P.WECHAT),
        ("https://zhuanlan.zhihu.com/p/10", P.ZHIHU),
        ("https://www.zhihu.com/question/20/answer/30", P.ZHIHU),
        ("https://www.xiaohongshu.com/explore/65a1", P.XIAOHONGSHU),
        ("http://xhslink.com/a/xyz", P.XIAOHONGSHU),
        ("https://www.bilibili.com/video/BV1xx411c7mD", P.BILIBILI),
        ("https://b23.tv/AbCdEf", P.BILIBILI),
    ])
    def test_given_known_url_should_detect_platform(self, url, expected):
        """已知域名应识别出对应平台。"""
        assert detect_platform(url) is expected

    def test_given_unknown_url_should_return_unknown(self):
        """未知域名应返回 UNKNOWN 而不是抛错。"""
        assert detect_platform("https://example.org/post") is P.UNKNOWN

    def test_given_lookalike_host_should_not_match(self):
        """仅包含平台名的其他域名不应被误判。"""
        assert detect_platform("https://notbilibili.com.evil.example/x") is P.UNKNOWN
        assert detect_platform("https://example.com/?ref=zhihu.com") is P.UNKNOWN


@pytest.mark.unit
class Describe_detect_platform_from_html:
    def test_given_mmbiz_cdn_should_detect_wechat(self):
        """页面包含 mmbiz 图床时应识别为公众号。"""
        assert detect_platform_from_html('<img src="https://mmbiz.qpic.cn/a/0">') is P.WECHAT

    def test_given_msg_cdn_url_should_detect_wechat(self):
        """页面包含 msg_cdn_url 变量时应识别为公众号。"""
        assert detect_platform_from_html('var msg_cdn_url = "x";') is P.WECHAT

    def test_given_wechat_and_bilibili_markers_should_prefer_wechat(self):
        """同时出现多个平台标记时按固定顺序优先公众号。"""
        page = 'var msg_cdn_url = "x"; <a href="https://www.bilibili.com/">b</a>'
        assert detect_platform_from_html(page) is P.WECHAT

    def test_given_cdn_hosts_should_detect_platforms(self):
        """各平台图床域名也应作为识别标记。"""
        assert detect_platform_from_html("//i0.hdslb.com/bfs/x.jpg") is P.BILIBILI
        assert detect_platform_from_html("https://pic1.zhimg.com/v2.jpg") is P.ZHIHU
        assert detect_platform_from_html("https://sns-webpic-qc.xhscdn.com/x") is P.XIAOHONGSHU

    def test_given_plain_page_should_stay_unknown(self):
        """没有任何标记时应保持 UNKNOWN。"""
        assert detect_platform_from_html("<html><body>hi</body></html>") is P.UNKNOWN


@pytest.mark.unit
class Describe_promote_platform:
    def test_should_promote_unknown_from_content(self):
        """URL 无法识别时应根据页面内容提升平台。"""
        assert promote_platform(P.UNKNOWN, "https://mmbiz.qpic.cn/x") is P.WECHAT

    def test_should_never_override_url_result(self):
        """URL 已识别的平台不应被页面内容改写。"""
        assert promote_platform(P.ZHIHU, 'var msg_cdn_url = "x";') is P.ZHIHU
