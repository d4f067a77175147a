from __future__ import annotations

import json

from fastapi import APIRouter, Query
from fastapi.responses import HTMLResponse

from portal_hub.core.config import settings

router = APIRouter(tags=["UI"])

SECTIONS = ("links", "docs", "memo", "settings")
DEFAULT_SECTION = "links"


def resolve_section(name: str | None) -> str:
    name = (name or "").strip().lower()
    return name if name in SECTIONS else DEFAULT_SECTION


PAGE = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8"/>
  <meta name="viewport" content="width=device-width, initial-scale=1"/>
  <title>Portal Hub</title>
  <style>
    :root { --bg:#f8fafc; --card:#ffffff; --fg:#0f172a; --muted:#64748b; --btn:#4f46e5; --chip:#e2e8f0; --danger:#ef4444; }
    body { margin:0; background:var(--bg); color:var(--fg); font-family: ui-sans-serif, system-ui, -apple-system, Segoe UI, Roboto, Helvetica, Arial; }
    .wrap { max-width:1000px; margin:0 auto; padding:24px 16px; }
    .card { background:var(--card); border:1px solid #e2e8f0; border-radius:18px; padding:18px; margin-top:14px; }
    .row { display:flex; gap:10px; align-items:center; flex-wrap:wrap; }
    input, textarea { border:1px solid #cbd5e1; border-radius:10px; padding:9px 11px; font:inherit; }
    textarea { width:100%; min-height:240px; box-sizing:border-box; }
    button { background:var(--btn); color:white; border:0; border-radius:10px; padding:9px 13px; cursor:pointer; font-weight:600; }
    button.secondary { background:var(--chip); color:var(--fg); }
    button.danger { background:var(--danger); }
    nav button.active { outline:2px solid var(--fg); }
    table { width:100%; border-collapse:collapse; }
    td { padding:9px 6px; border-bottom:1px solid #f1f5f9; vertical-align:top; }
    .muted { color:var(--muted); font-size:13px; }
    .hidden { display:none; }
    #drop { border:2px dashed #cbd5e1; border-radius:18px; padding:28px; text-align:center; cursor:pointer; }
    #drop.active { border-color:var(--btn); background:#eef2ff; }
  </style>
</head>
<body>
<div class="wrap">
  <div id="login" class="card">
    <h1>Portal Hub</h1>
    <p class="muted">Welcome back, please log in</p>
    <form id="login-form" class="row">
      <input id="email" type="email" placeholder="Email" required/>
      <input id="password" type="password" placeholder="Password" required/>
      <button type="submit">Sign in</button>
    </form>
    <p id="login-error" class="muted"></p>
  </div>

  <div id="shell" class="hidden">
    <div class="row" style="justify-content:space-between;">
      <nav class="row">
        <button class="secondary" data-section="links">Links</button>
        <button class="secondary" data-section="docs">Docs</button>
        <button class="secondary" data-section="memo">Memo</button>
        <button class="secondary" data-section="settings">Settings</button>
      </nav>
      <div class="row"><span id="who" class="muted"></span><button class="secondary" onclick="signOut()">Log out</button></div>
    </div>
    <p id="status" class="muted"></p>

    <section id="section-links" class="card hidden">
      <div class="row">
        <input id="link-search" placeholder="Search your links..." oninput="renderLinks()"/>
        <input id="link-title" placeholder="Website Name"/>
        <input id="link-url" type="url" placeholder="https://example.com"/>
        <button onclick="addLink()">Save Link</button>
      </div>
      <table id="links"></table>
    </section>

    <section id="section-docs" class="card hidden">
      <div id="drop">Drop your files here<br/><span class="muted">Maximum file size __MAX_MB__MB at one time</span></div>
      <input id="file" type="file" class="hidden"/>
      <div class="row" style="margin-top:12px;"><input id="doc-search" placeholder="Search documents..." oninput="loadDocs()"/></div>
      <table id="docs"></table>
    </section>

    <section id="section-memo" class="card hidden">
      <div class="row">
        <input id="memo-search" placeholder="Search notes..." oninput="loadMemos()"/>
        <button onclick="newMemo()">New</button>
      </div>
      <table id="memos"></table>
      <div class="row" style="margin-top:12px;"><input id="memo-title" placeholder="Memo Title..." style="flex:1"/><button onclick="saveMemo()">Save</button></div>
      <textarea id="memo-content" placeholder="Start typing your thoughts here..."></textarea>
    </section>

    <section id="section-settings" class="card hidden">
      <h3>Change password</h3>
      <div class="row">
        <input id="pw-old" type="password" placeholder="Current password"/>
        <input id="pw-new" type="password" placeholder="New password"/>
        <input id="pw-confirm" type="password" placeholder="Confirm new password"/>
        <button onclick="changePassword()">Update</button>
      </div>
    </section>
  </div>
</div>

<script>
// the session lives in memory only; reloading the page signs out
let token = null;
let section = __SECTION__;
let links = [];
let uploading = false;

function h(s) { const d = document.createElement('div'); d.textContent = s == null ? '' : String(s); return d.innerHTML; }
function status(msg) { document.getElementById('status').textContent = msg || ''; }

async function api(path, opts = {}) {
  opts.headers = Object.assign({}, opts.headers || {}, token ? { 'Authorization': 'Bearer ' + token } : {});
  const resp = await fetch(path, opts);
  if (!resp.ok) {
    let detail = resp.statusText;
    try { detail = (await resp.json()).detail || detail; } catch (e) {}
    throw new Error(detail);
  }
  return resp;
}

document.getElementById('login-form').addEventListener('submit', async (e) => {
  e.preventDefault();
  const body = new URLSearchParams({ username: email.value, password: password.value });
  try {
    const data = await (await api('/auth/token', { method: 'POST', body })).json();
    token = data.access_token;
    const me = await (await api('/auth/me')).json();
    document.getElementById('who').textContent = me.email;
    document.getElementById('login').classList.add('hidden');
    document.getElementById('shell').classList.remove('hidden');
    show(section);
  } catch (err) {
    document.getElementById('login-error').textContent = err.message || 'Authentication failed';
  }
});

async function signOut() {
  try { await api('/auth/logout', { method: 'POST' }); } catch (e) {}
  token = null;
  document.getElementById('shell').classList.add('hidden');
  document.getElementById('login').classList.remove('hidden');
}

function show(name) {
  section = name;
  document.querySelectorAll('section').forEach(s => s.classList.add('hidden'));
  document.getElementById('section-' + name).classList.remove('hidden');
  document.querySelectorAll('nav button').forEach(b => b.classList.toggle('active', b.dataset.section === name));
  status('');
  if (name === 'links') loadLinks();
  if (name === 'docs') loadDocs();
  if (name === 'memo') loadMemos();
}
document.querySelectorAll('nav button').forEach(b => b.addEventListener('click', () => show(b.dataset.section)));

async function loadLinks() {
  links = (await (await api('/links')).json()).links;
  renderLinks();
}
function renderLinks() {
  const q = document.getElementById('link-search').value.toLowerCase();
  const rows = links.filter(l => l.title.toLowerCase().includes(q) || l.url.toLowerCase().includes(q));
  document.getElementById('links').innerHTML = rows.map(l => `
    <tr><td><strong>${h(l.title)}</strong><div class="muted">${h(l.url)}</div></td>
    <td><a href="${h(l.url)}" target="_blank" rel="noopener noreferrer">Visit Site</a>
      <button class="secondary" onclick="editLink('${l.id}')">Edit</button>
      <button class="danger" onclick="deleteLink('${l.id}')">Delete</button></td></tr>`).join('')
    || '<tr><td class="muted">No links found.</td></tr>';
}
async function addLink() {
  try {
    await api('/links', { method: 'POST', headers: { 'Content-Type': 'application/json' },
      body: JSON.stringify({ title: document.getElementById('link-title').value, url: document.getElementById('link-url').value }) });
    document.getElementById('link-title').value = '';
    document.getElementById('link-url').value = '';
    loadLinks();
  } catch (e) { status('Insert failed: ' + e.message); }
}
async function editLink(id) {
  const link = links.find(l => l.id === id);
  const title = prompt('Title', link.title); if (title === null) return;
  const url = prompt('URL', link.url); if (url === null) return;
  try {
    await api('/links/' + id, { method: 'PUT', headers: { 'Content-Type': 'application/json' }, body: JSON.stringify({ title, url }) });
    loadLinks();
  } catch (e) { status('Update failed: ' + e.message); }
}
async function deleteLink(id) {
  if (!confirm('Delete this link?')) return;
  try { await api('/links/' + id + '?confirm=true', { method: 'DELETE' }); loadLinks(); }
  catch (e) { status('Delete failed: ' + e.message); }
}

async function loadDocs() {
  const q = encodeURIComponent(document.getElementById('doc-search').value);
  const data = await (await api('/docs?search=' + q)).json();
  document.getElementById('docs').innerHTML = data.documents.map(d => `
    <tr><td><strong>${h(d.name)}</strong>
      <div class="muted">${h(d.category)} &middot; ${new Date(d.created_at).toLocaleDateString()} &middot; ${(d.size / 1024 / 1024).toFixed(2)} MB</div></td>
    <td><button class="secondary" onclick="viewDoc('${d.id}')">View</button>
      <a href="#" onclick="downloadDoc('${d.id}', this.dataset.name); return false;" data-name="${h(d.name)}">Download</a>
      <button class="secondary" onclick="renameDoc('${d.id}', this.dataset.name)" data-name="${h(d.name)}">Rename</button>
      <button class="danger" onclick="deleteDoc('${d.id}', this.dataset.name)" data-name="${h(d.name)}">Delete</button></td></tr>`).join('')
    || '<tr><td class="muted">No documents found.</td></tr>';
}
async function upload(files) {
  if (!files || !files.length || uploading) return;
  uploading = true;
  status('Uploading your file...');
  const form = new FormData();
  form.append('file', files[0]);
  try { await api('/docs', { method: 'POST', body: form }); status(''); loadDocs(); }
  catch (e) { status('Upload failed: ' + e.message); }
  finally { uploading = false; }
}
const drop = document.getElementById('drop');
drop.addEventListener('click', () => document.getElementById('file').click());
document.getElementById('file').addEventListener('change', (e) => upload(e.target.files));
['dragenter', 'dragover'].forEach(t => drop.addEventListener(t, (e) => { e.preventDefault(); drop.classList.add('active'); }));
drop.addEventListener('dragleave', (e) => { e.preventDefault(); drop.classList.remove('active'); });
drop.addEventListener('drop', (e) => { e.preventDefault(); drop.classList.remove('active'); upload(e.dataTransfer.files); });

async function viewDoc(id) {
  try { const data = await (await api('/docs/' + id + '/view')).json(); window.open(data.url, '_blank'); }
  catch (e) { status('View failed: ' + e.message); }
}
async function downloadDoc(id, name) {
  try {
    const blob = await (await api('/docs/' + id + '/download')).blob();
    const url = window.URL.createObjectURL(blob);
    const a = document.createElement('a');
    a.href = url; a.download = name; a.click();
    window.URL.revokeObjectURL(url);
  } catch (e) { status('Download failed: ' + e.message); }
}
async function renameDoc(id, name) {
  const dot = name.lastIndexOf('.');
  const base = dot > 0 ? name.substring(0, dot) : name;
  const ext = dot > 0 ? name.substring(dot) : '';
  const next = prompt('Rename (extension ' + (ext || 'none') + ' is kept)', base);
  if (next === null) return;
  try {
    await api('/docs/' + id, { method: 'PATCH', headers: { 'Content-Type': 'application/json' }, body: JSON.stringify({ base_name: next }) });
    loadDocs();
  } catch (e) { status('Rename failed: ' + e.message); }
}
async function deleteDoc(id, name) {
  if (!confirm('Permanently delete ' + name + '?')) return;
  try { await api('/docs/' + id + '?confirm=true', { method: 'DELETE' }); loadDocs(); }
  catch (e) { status('Delete failed: ' + e.message); }
}

async function loadMemos() {
  const q = encodeURIComponent(document.getElementById('memo-search').value);
  const data = await (await api('/memos?search=' + q)).json();
  document.getElementById('memos').innerHTML = data.memos.map(m => `
    <tr><td style="cursor:pointer;${m.id === data.selected_id ? 'font-weight:700;' : ''}" onclick="selectMemo('${m.id}')">${h(m.title)}
      <div class="muted">${new Date(m.created_at).toLocaleDateString()}</div></td>
    <td><button class="danger" onclick="deleteMemo('${m.id}')">Delete</button></td></tr>`).join('')
    || '<tr><td class="muted">No notes found.</td></tr>';
}
async function selectMemo(id) {
  const data = await (await api('/memos/selection/' + id, { method: 'PUT' })).json();
  document.getElementById('memo-title').value = data.selected.title || '';
  document.getElementById('memo-content').value = data.selected.content || '';
  loadMemos();
}
async function newMemo() {
  await api('/memos/selection', { method: 'DELETE' });
  document.getElementById('memo-title').value = '';
  document.getElementById('memo-content').value = '';
  loadMemos();
}
async function saveMemo() {
  const title = document.getElementById('memo-title').value;
  if (!title.trim()) { status('Please enter a title'); return; }
  try {
    await api('/memos', { method: 'POST', headers: { 'Content-Type': 'application/json' },
      body: JSON.stringify({ title, content: document.getElementById('memo-content').value }) });
    loadMemos();
  } catch (e) { status('Save failed: ' + e.message); }
}
async function deleteMemo(id) {
  if (!confirm('Delete memo?')) return;
  try { await api('/memos/' + id + '?confirm=true', { method: 'DELETE' }); loadMemos(); }
  catch (e) { status('Delete failed: ' + e.message); }
}

async function changePassword() {
  const body = { current_password: document.getElementById('pw-old').value,
                 new_password: document.getElementById('pw-new').value,
                 confirm_password: document.getElementById('pw-confirm').value };
  if (body.new_password !== body.confirm_password) { status('Passwords do not match'); return; }
  try {
    await api('/auth/change-password', { method: 'POST', headers: { 'Content-Type': 'application/json' }, body: JSON.stringify(body) });
    ['pw-old', 'pw-new', 'pw-confirm'].forEach(id => document.getElementById(id).value = '');
    status('Password updated successfully.');
  } catch (e) { status(e.message || 'Update failed'); }
}
</script>
</body>
</html>"""


def render_dashboard(section: str) -> str:
    return (
        PAGE.replace("__SECTION__", json.dumps(resolve_section(section)))
        .replace("__MAX_MB__", str(settings.MAX_FILE_SIZE // (1024 * 1024)))
    )


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
@router.get("/ui", response_class=HTMLResponse)
async def ui_home(section: str = Query(DEFAULT_SECTION)):
    return HTMLResponse(render_dashboard(section), headers={"Cache-Control": "no-store"})
