"""Single-page UI that consumes the calorie tracker API."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["ui"])


@router.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    """Serve the setup, dashboard and photo tools page."""
    return HTMLResponse(_PAGE_HTML)


_PAGE_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>AI Calorie Counter</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      section { margin-bottom: 1.5rem; }
      .hidden { display: none; }
      .row { margin-bottom: 0.6rem; }
      .error { color: #b91c1c; }
      .bar { background: #8884d8; height: 1rem; margin: 0.2rem 0; }
      .tabs button.active { font-weight: bold; text-decoration: underline; }
      img.preview { max-width: 240px; display: block; margin: 0.5rem 0; }
      video { max-width: 320px; }
      li img { width: 48px; height: 48px; object-fit: cover; vertical-align: middle; }
    </style>
  </head>
  <body>
    <section id="setup" class="hidden">
      <h1>Welcome to AI Calorie Counter</h1>
      <p id="setup-error" class="error"></p>
      <div class="row">Height (cm) <input id="height" type="number" value="175" /></div>
      <div class="row">Weight (kg) <input id="weight" type="number" value="70" /></div>
      <div class="row">Age <input id="age" type="number" value="30" /></div>
      <div class="row">Gender
        <select id="gender"><option value="male">Male</option>
        <option value="female">Female</option></select></div>
      <div class="row">Activity level
        <select id="activityLevel">
          <option value="sedentary">Sedentary</option>
          <option value="light">Lightly active</option>
          <option value="moderate" selected>Moderately active</option>
          <option value="active">Very active</option>
          <option value="very_active">Extra active</option>
        </select></div>
      <div class="row">Goal
        <select id="goal"><option value="lose">Weight loss</option>
        <option value="maintain" selected>Maintain weight</option>
        <option value="gain">Weight gain</option></select></div>
      <button onclick="setup()">Calculate &amp; start tracking</button>
    </section>

    <section id="dashboard" class="hidden">
      <h1>Your Dashboard <button onclick="resetProfile()">Reset profile</button></h1>
      <h2>Today's summary</h2>
      <div id="summary"></div>
      <div class="tabs">
        <button data-tab="Today" onclick="loadDashboard('Today')">Today</button>
        <button data-tab="Weekly" onclick="loadDashboard('Weekly')">Weekly</button>
        <button data-tab="Monthly" onclick="loadDashboard('Monthly')">Monthly</button>
      </div>
      <div id="chart"></div>
      <ul id="logs"></ul>

      <h2>Meal logger</h2>
      <input id="meal-file" type="file" accept="image/*" onchange="fromFile(this, 'meal')" />
      <button onclick="openCamera('meal')">Use camera</button>
      <div id="meal"></div>

      <h2>Grocery mentor</h2>
      <input id="grocery-file" type="file" accept="image/*" onchange="fromFile(this, 'grocery')" />
      <button onclick="openCamera('grocery')">Use camera</button>
      <div id="grocery"></div>
    </section>

    <section id="camera" class="hidden">
      <p id="camera-error" class="error"></p>
      <video id="video" autoplay playsinline></video><br />
      <button onclick="snap()">Capture</button>
      <button onclick="closeCamera()">Cancel</button>
    </section>

    <script>
      let activeTab = 'Today';
      let stream = null;
      let cameraTarget = null;

      async function api(path, options = {}) {
        const res = await fetch(path, {
          headers: { 'Content-Type': 'application/json' }, ...options
        });
        const data = await res.json();
        if (!res.ok) throw new Error(data.detail || ('Error: ' + res.status));
        return data;
      }

      function show(id, visible) {
        document.getElementById(id).classList.toggle('hidden', !visible);
      }

      async function boot() {
        const session = await api('/api/session');
        show('setup', session.view === 'setup');
        show('dashboard', session.view === 'dashboard');
        if (session.view === 'dashboard') {
          await loadDashboard(activeTab);
          renderFlow('meal', await api('/api/meal'));
          renderFlow('grocery', await api('/api/grocery'));
        }
      }

      async function setup() {
        const body = {};
        for (const key of ['height', 'weight', 'age']) {
          body[key] = Number(document.getElementById(key).value);
        }
        for (const key of ['gender', 'activityLevel', 'goal']) {
          body[key] = document.getElementById(key).value;
        }
        try {
          await api('/api/setup', { method: 'POST', body: JSON.stringify(body) });
          await boot();
        } catch (err) {
          document.getElementById('setup-error').textContent = err.message;
        }
      }

      async function resetProfile() {
        await api('/api/reset', { method: 'POST' });
        await boot();
      }

      async function loadDashboard(tab) {
        activeTab = tab;
        const data = await api('/api/dashboard?tab=' + tab);
        const req = data.dailyRequirements;
        const today = data.today;
        document.getElementById('summary').innerHTML = [
          ['Calories', today.calories, req.calories, 'kcal'],
          ['Protein', today.protein, req.protein, 'g'],
          ['Carbs', today.carbohydrates, req.carbohydrates, 'g'],
          ['Fat', today.fat, req.fat, 'g'],
        ].map(([label, value, total, unit]) =>
          `<div>${label}: ${Math.round(value)} / ${Math.round(total)} ${unit}</div>`
        ).join('');
        document.querySelectorAll('.tabs button').forEach((button) => {
          button.classList.toggle('active', button.dataset.tab === tab);
        });
        const peak = Math.max(1, ...data.chart.map((b) => b.calories));
        document.getElementById('chart').innerHTML = data.chart.map((b) =>
          `<div>${b.name} (${b.calories} kcal)<div class="bar" ` +
          `style="width:${(b.calories / peak) * 100}%"></div></div>`
        ).join('');
        const logs = document.getElementById('logs');
        logs.innerHTML = data.logs.length ? data.logs.map((log) =>
          `<li><img src="${log.image}" alt="" /> <b>${log.name}</b> ` +
          `${new Date(log.timestamp).toLocaleString()} - ` +
          `C: ${log.nutrition.calories.toFixed(0)} ` +
          `P: ${log.nutrition.protein.toFixed(1)}g ` +
          `F: ${log.nutrition.fat.toFixed(1)}g ` +
          `Cb: ${log.nutrition.carbohydrates.toFixed(1)}g</li>`
        ).join('') : '<p>No meals logged for this period.</p>';
      }

      function fromFile(input, tool) {
        const file = input.files[0];
        input.value = '';
        if (!file) return;
        const reader = new FileReader();
        reader.onloadend = () => analyze(tool, reader.result);
        reader.readAsDataURL(file);
      }

      async function analyze(tool, dataUrl) {
        renderFlow(tool, { status: 'analyzing', image: dataUrl });
        try {
          const state = await api(`/api/${tool}/analyze`, {
            method: 'POST', body: JSON.stringify({ image: dataUrl })
          });
          renderFlow(tool, state);
        } catch (err) {
          renderFlow(tool, { status: 'error', error: err.message });
        }
      }

      async function flowAction(tool, action, body) {
        const options = { method: 'POST' };
        if (body) options.body = JSON.stringify(body);
        try {
          const state = await api(`/api/${tool}/${action}`, options);
          if (action === 'confirm') {
            renderFlow(tool, await api(`/api/${tool}`));
            await loadDashboard(activeTab);
          } else {
            renderFlow(tool, state);
          }
        } catch (err) {
          renderFlow(tool, { status: 'error', error: err.message });
        }
      }

      async function answerAndRefine(form) {
        const answers = {};
        for (const select of form.querySelectorAll('select')) {
          answers[select.name] = select.value;
        }
        await flowAction('meal', 'answers', { answers });
        await flowAction('meal', 'refine');
      }

      function renderFlow(tool, state) {
        const box = document.getElementById(tool);
        let html = state.image ? `<img class="preview" src="${state.image}" />` : '';
        if (state.status === 'analyzing' || state.status === 'refining') {
          html += '<p>Analyzing...</p>';
        } else if (state.status === 'error') {
          html += `<p class="error">${state.error}</p>`;
          html += `<button onclick="flowAction('${tool}', 'reset')">Try again</button>`;
        } else if (state.status === 'awaiting_answers') {
          html += `<h3>${state.meal.dishName}</h3><form onsubmit="answerAndRefine(this); return false;">`;
          for (const q of state.meal.clarifyingQuestions) {
            html += `<div class="row">${q.question} <select name="${q.question}">` +
              q.options.map((o) => `<option>${o}</option>`).join('') + '</select></div>';
          }
          html += '<button type="submit">Confirm details</button></form>';
        } else if (state.status === 'complete' && state.meal) {
          const n = state.nutrition;
          html += `<h3>${state.meal.dishName}</h3><p>${n.portionSize}: ` +
            `${Math.round(n.calories)} kcal, P ${n.protein}g, C ${n.carbohydrates}g, ` +
            `F ${n.fat}g</p>` +
            `<button onclick="flowAction('meal', 'confirm')">Add to daily log</button>` +
            `<button onclick="flowAction('meal', 'reset')">Analyze another meal</button>`;
        } else if (state.status === 'complete' && state.grocery) {
          const g = state.grocery;
          html += `<h3>${g.itemName}</h3><p>${g.healthMentorSummary}</p><ul>` +
            g.ingredients.map((i) =>
              `<li>[${i.healthImpact}] ${i.name}: ${i.explanation}</li>`).join('') +
            '</ul><p>Alternatives: ' + g.healthyAlternatives.join(', ') + '</p>' +
            `<button onclick="flowAction('grocery', 'reset')">Scan another item</button>`;
        }
        box.innerHTML = html;
      }

      async function openCamera(tool) {
        cameraTarget = tool;
        document.getElementById('camera-error').textContent = '';
        show('camera', true);
        try {
          stream = await navigator.mediaDevices.getUserMedia({
            video: { facingMode: 'environment' }
          });
          document.getElementById('video').srcObject = stream;
        } catch (err) {
          document.getElementById('camera-error').textContent =
            'Could not access the camera. Please check permissions or upload a photo.';
        }
      }

      function stopStream() {
        if (stream) {
          stream.getTracks().forEach((track) => track.stop());
          stream = null;
        }
        document.getElementById('video').srcObject = null;
      }

      function closeCamera() {
        stopStream();
        show('camera', false);
      }

      function snap() {
        const video = document.getElementById('video');
        if (!stream || !video.videoWidth) return;
        const canvas = document.createElement('canvas');
        canvas.width = video.videoWidth;
        canvas.height = video.videoHeight;
        canvas.getContext('2d').drawImage(video, 0, 0);
        const dataUrl = canvas.toDataURL('image/jpeg', 0.95);
        closeCamera();
        analyze(cameraTarget, dataUrl);
      }

      window.addEventListener('pagehide', stopStream);
      boot();
    </script>
  </body>
</html>
"""
