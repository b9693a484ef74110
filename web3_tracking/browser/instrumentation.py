"""
JavaScript sources injected into, or evaluated in, the analysed page.

The fingerprinting script is registered as an init script so it runs
before any page script; the flags it records on ``window`` are read
back after navigation from ``window._fingerprinting`` with
``FINGERPRINT_FLAGS_JS``.
"""

from __future__ import annotations

FINGERPRINT_INIT_SCRIPT = """
(() => {
    const flag = (name) => {
        window._fingerprinting = window._fingerprinting || {};
        window._fingerprinting[name] = true;
    };
    const wrap = (cls, method, name) => {
        const proto = window[cls] && window[cls].prototype;
        if (!proto || typeof proto[method] !== 'function') return;
        const original = proto[method];
        proto[method] = function () {
            flag(name);
            return original.apply(this, arguments);
        };
    };

    // Canvas
    wrap('HTMLCanvasElement', 'toDataURL', 'canvas');
    // WebGL
    wrap('WebGLRenderingContext', 'getParameter', 'webgl');
    // Audio
    wrap('AudioContext', 'createOscillator', 'audio');
})();
"""

FINGERPRINT_FLAGS_JS = "() => window._fingerprinting || {}"

SCRIPTS_JS = """() =>
    Array.from(document.getElementsByTagName('script')).map(script => ({
        src: script.src || '',
        content: script.innerHTML || '',
    }))
"""

LOCAL_STORAGE_JS = """() => {
    const data = {};
    for (let i = 0; i < localStorage.length; i++) {
        const key = localStorage.key(i);
        if (key !== null) data[key] = localStorage.getItem(key) || '';
    }
    return data;
}"""

WALLET_PROBE_JS = """() => ({
    hasProvider: !!window.ethereum,
    source: document.documentElement ? document.documentElement.outerHTML : '',
})"""
